# hwid_agent/identity/resolver.py

from dataclasses import dataclass, field

from hwid_agent.utils.logger import logger
from hwid_agent.utils.time_utils import now_ts

LAST_RESORT_TIER = "last_resort"


@dataclass(frozen=True)
class TierResult:
    tier: str
    value: str = ""
    reason: str = ""

    @property
    def ok(self):
        return bool(self.value)


@dataclass(frozen=True)
class Resolution:
    composite: str
    tier: str
    degraded: bool = False
    attempts: list = field(default_factory=list)


def run_tier(name, tier):
    """
    Runs one tier and captures its outcome instead of raising
    """
    try:
        value = tier()
    except Exception as e:
        return TierResult(name, reason=f"{type(e).__name__}: {e}")

    value = (value or "").strip()
    if not value:
        return TierResult(name, reason="empty result")
    return TierResult(name, value=value)


def resolve_identifier(collector, clock=None):
    """
    Walks the collector's tiers in priority order and returns the first
    non-empty composite identifier.

    When every tier fails the composite is salted with the clock, so the
    degraded value differs between processes.
    """
    clock = clock or now_ts
    attempts = []

    for name, tier in collector.identifier_tiers():
        result = run_tier(name, tier)
        attempts.append(result)

        if result.ok:
            logger.debug(f"Identifier resolved by tier {name}")
            return Resolution(result.value, name, attempts=attempts)

        logger.debug(f"Tier {name} produced nothing: {result.reason}")

    composite = last_resort_identifier(collector, clock)
    logger.warning(
        f"All {collector.platform.value} identifier tiers failed, "
        f"using degraded non-deterministic identifier"
    )
    return Resolution(composite, LAST_RESORT_TIER, degraded=True, attempts=attempts)


def last_resort_identifier(collector, clock):
    try:
        os_name = collector.probe.os_name() or collector.platform.value
    except Exception:
        os_name = collector.platform.value

    try:
        millis = int(clock() * 1000)
    except Exception:
        millis = int(now_ts() * 1000)

    return f"{os_name}-{collector.generic_os_version()}-{millis}"

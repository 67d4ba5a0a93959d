# hwid_agent/identity/device_identity.py

import threading
from dataclasses import asdict, dataclass
from enum import Enum

from hwid_agent.app_info import DEFAULT_NAME, DEFAULT_VERSION
from hwid_agent.identity.headers import to_headers
from hwid_agent.identity.platforms import collector_for, detect_platform
from hwid_agent.identity.resolver import LAST_RESORT_TIER, last_resort_identifier, resolve_identifier
from hwid_agent.utils.hash_utils import digest_identifier
from hwid_agent.utils.logger import logger
from hwid_agent.utils.time_utils import now_ts


@dataclass(frozen=True)
class DeviceIdentity:
    hwid: str
    device_os: str
    os_version: str
    device_model: str
    user_agent: str
    degraded: bool = False
    source_tier: str = ""

    @property
    def headers(self):
        return to_headers(self)

    def as_dict(self):
        return asdict(self)


class CacheState(Enum):
    UNCOMPUTED = "uncomputed"
    COMPUTING = "computing"
    CACHED = "cached"


def build_user_agent(app_name, app_version, device_os, os_version, device_model):
    return f"{app_name}/{app_version} ({device_os} {os_version}; {device_model})"


class HwidService:
    """
    Owns the process-wide DeviceIdentity.

    The probe chain runs at most once until invalidate() is called.
    Concurrent callers share a single in-flight resolution.
    """

    def __init__(self, probe, app_info_provider, platform=None, clock=now_ts):
        self.probe = probe
        self.app_info_provider = app_info_provider
        self.platform = platform or detect_platform()
        self.clock = clock

        self.collector = collector_for(self.platform, probe)

        self._identity = None
        self._resolution = None
        self._generation = 0
        self._computing = False

        self._state_lock = threading.Lock()
        self._resolve_lock = threading.Lock()

    # ---------------- STATE ----------------

    @property
    def state(self):
        with self._state_lock:
            if self._identity is not None:
                return CacheState.CACHED
            if self._computing:
                return CacheState.COMPUTING
            return CacheState.UNCOMPUTED

    @property
    def last_resolution(self):
        with self._state_lock:
            return self._resolution

    def invalidate(self):
        """
        Drops the cached identity; an in-flight resolution is not stored
        """
        with self._state_lock:
            self._identity = None
            self._resolution = None
            self._generation += 1
        logger.info("Device identity cache invalidated")

    # ---------------- RESOLUTION ----------------

    def get_device_identity(self):
        with self._state_lock:
            if self._identity is not None:
                return self._identity

        with self._resolve_lock:
            with self._state_lock:
                # another caller finished while we waited
                if self._identity is not None:
                    return self._identity
                generation = self._generation
                self._computing = True

            try:
                identity, resolution = self._build()
            finally:
                with self._state_lock:
                    self._computing = False

            with self._state_lock:
                if generation == self._generation:
                    self._identity = identity
                    self._resolution = resolution

        return identity

    def headers(self):
        return to_headers(self.get_device_identity())

    def _build(self):
        try:
            return self._resolve()
        except Exception:
            logger.exception("Device identity resolution failed, using generic values")
            return self._generic_identity(), None

    def _resolve(self):
        collector = self.collector

        resolution = resolve_identifier(collector, clock=self.clock)
        device_os = collector.device_os()
        os_version = collector.collect_os_version()
        device_model = collector.collect_model()

        identity = DeviceIdentity(
            hwid=digest_identifier(resolution.composite),
            device_os=device_os,
            os_version=os_version,
            device_model=device_model,
            user_agent=self._user_agent(device_os, os_version, device_model),
            degraded=resolution.degraded,
            source_tier=resolution.tier,
        )

        logger.info(
            f"Device identity resolved via {resolution.tier} "
            f"({device_os} {os_version}; {device_model})"
        )
        return identity, resolution

    def _generic_identity(self):
        device_os = self.collector.device_os()
        os_version = self.collector.generic_os_version()
        device_model = self.collector.generic_model()
        composite = last_resort_identifier(self.collector, self.clock)

        return DeviceIdentity(
            hwid=digest_identifier(composite),
            device_os=device_os,
            os_version=os_version,
            device_model=device_model,
            user_agent=self._user_agent(device_os, os_version, device_model),
            degraded=True,
            source_tier=LAST_RESORT_TIER,
        )

    def _user_agent(self, device_os, os_version, device_model):
        try:
            app = self.app_info_provider()
            name = app.name or DEFAULT_NAME
            version = app.version or DEFAULT_VERSION
        except Exception as e:
            logger.debug(f"Application metadata unavailable: {e}")
            name, version = DEFAULT_NAME, DEFAULT_VERSION

        return build_user_agent(name, version, device_os, os_version, device_model)

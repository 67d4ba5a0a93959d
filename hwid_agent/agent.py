# hwid_agent/agent.py

import argparse
import json

from hwid_agent.app_info import AppInfo, static_provider
from hwid_agent.identity.device_identity import HwidService
from hwid_agent.identity.platforms import Platform
from hwid_agent.probe.system_probe import DEFAULT_TIMEOUT, SystemProbe
from hwid_agent.sender.api_client import DEFAULT_API_URL, DEFAULT_TIMEOUT as DEFAULT_SEND_TIMEOUT
from hwid_agent.sender.api_client import send_payload
from hwid_agent.utils.config_loader import DEFAULT_CONFIG, load_config
from hwid_agent.utils.logger import logger, setup_logging


class HwidAgent:
    """
    Composition root: wires config, logging, probe and the identity service
    """

    def __init__(self, config=None, platform=None, probe=None):
        self.config = config if config is not None else load_config(DEFAULT_CONFIG)

        log_config = self.config.get("logging") or {}
        setup_logging(log_config.get("level") or "INFO", log_config.get("log_file"))

        probe_config = self.config.get("probe") or {}
        self.probe = probe or SystemProbe(
            command_timeout=probe_config.get("command_timeout_seconds", DEFAULT_TIMEOUT)
        )

        self.app_info = AppInfo.from_config(self.config)
        self.service = HwidService(
            probe=self.probe,
            app_info_provider=static_provider(self.app_info),
            platform=platform,
        )

        backend = self.config.get("backend") or {}
        self.api_url = backend.get("api_url", DEFAULT_API_URL)
        self.timeout = backend.get("timeout_seconds", DEFAULT_SEND_TIMEOUT)

    def identity(self):
        return self.service.get_device_identity()

    def headers(self):
        return self.service.headers()

    def report(self):
        """
        Posts the resolved identity to the backend
        """
        identity = self.identity()
        payload = {
            "hwid": identity.hwid,
            "device_os": identity.device_os,
            "os_version": identity.os_version,
            "device_model": identity.device_model,
            "degraded": identity.degraded,
        }
        ok = send_payload(payload, identity, api_url=self.api_url, timeout=self.timeout)
        if ok:
            logger.info(f"Reported device identity to {self.api_url}")
        return ok


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Device identity resolver")
    parser.add_argument("--config", default=None, help="Path to an agent YAML config")
    parser.add_argument(
        "--platform",
        choices=[p.name.lower() for p in Platform],
        default=None,
        help="Override platform detection",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("show", help="Print the resolved device identity")
    subparsers.add_parser("headers", help="Print the outbound identity headers")
    subparsers.add_parser("report", help="Send the identity to the configured backend")

    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)

    config = load_config(args.config, base_dir="") if args.config else None
    platform = Platform[args.platform.upper()] if args.platform else None
    agent = HwidAgent(config=config, platform=platform)

    if args.command == "show":
        print(json.dumps(agent.identity().as_dict(), indent=2))
        return 0

    if args.command == "headers":
        print(json.dumps(agent.headers(), indent=2))
        return 0

    return 0 if agent.report() else 1

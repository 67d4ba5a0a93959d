# hwid_agent/__init__.py

from hwid_agent.identity.device_identity import DeviceIdentity, HwidService
from hwid_agent.identity.headers import to_headers

__all__ = ["DeviceIdentity", "HwidService", "to_headers"]

# hwid_agent/app_info.py

from dataclasses import dataclass

DEFAULT_NAME = "HwidAgent"
DEFAULT_VERSION = "0.0.0"


@dataclass(frozen=True)
class AppInfo:
    name: str
    version: str

    @classmethod
    def from_config(cls, config):
        """
        Reads the `app` section of the agent config
        """
        app = (config or {}).get("app") or {}
        return cls(
            name=str(app.get("name") or DEFAULT_NAME),
            version=str(app.get("version") or DEFAULT_VERSION),
        )


def static_provider(app_info):
    return lambda: app_info

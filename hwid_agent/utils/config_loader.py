# hwid_agent/utils/config_loader.py

import os

import yaml

DEFAULT_CONFIG = "config/agent_config.yaml"

# env var -> (section, key, cast)
ENV_OVERRIDES = {
    "HWID_BACKEND_URL": ("backend", "api_url", str),
    "HWID_BACKEND_TIMEOUT": ("backend", "timeout_seconds", float),
    "HWID_PROBE_TIMEOUT": ("probe", "command_timeout_seconds", float),
    "HWID_LOG_LEVEL": ("logging", "level", str),
}


def load_config(relative_path=DEFAULT_CONFIG, base_dir=None):
    """
    Load YAML config safely
    """
    if base_dir is None:
        base_dir = os.path.dirname(os.path.dirname(__file__))
    config_path = os.path.join(base_dir, relative_path)

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Agent config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Agent config must be a mapping: {config_path}")

    return apply_env_overrides(config)


def apply_env_overrides(config, environ=None):
    environ = os.environ if environ is None else environ

    for var, (section, key, cast) in ENV_OVERRIDES.items():
        raw = environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            value = cast(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {var}: {raw!r}")
        if not isinstance(config.get(section), dict):
            config[section] = {}
        config[section][key] = value

    return config

"""
Configuration — loads settings from .formatbridge.yaml, environment
variables, and built-in defaults (in that priority order: CLI args > env >
YAML > defaults).
"""

import os
import shlex

import yaml


_DEFAULTS = {
    "formatter_command": "clang-format",
    "style": "file",
    "fallback_style": "",
    "git_command": "git",
    "encoding": "utf-8",
    "timeout": 0.0,
    "log_dir": ".formatbridge/logs",
    "log_to_file": False,
}

# Config file search locations
_CONFIG_FILENAMES = [".formatbridge.yaml", ".formatbridge.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    # Search CWD first, then home directory
    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Formatter bridge configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables
    3. .formatbridge.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        command = _get("FORMATBRIDGE_COMMAND", "formatter_command",
                       _DEFAULTS["formatter_command"])
        self.FORMATTER_COMMAND: list[str] = shlex.split(command)

        self.STYLE = _get("FORMATBRIDGE_STYLE", "style", _DEFAULTS["style"])
        self.FALLBACK_STYLE = _get("FORMATBRIDGE_FALLBACK_STYLE",
                                   "fallback_style",
                                   _DEFAULTS["fallback_style"])
        self.GIT_COMMAND = _get("FORMATBRIDGE_GIT", "git_command",
                                _DEFAULTS["git_command"])

        # Codecs that write a byte-order mark are refused by TextDocument
        self.ENCODING = _get("FORMATBRIDGE_ENCODING", "encoding",
                             _DEFAULTS["encoding"])

        # Seconds; 0 waits for the formatter indefinitely
        self.TIMEOUT = _get("FORMATBRIDGE_TIMEOUT", "timeout",
                            _DEFAULTS["timeout"], cast=float)

        self.LOG_DIR = _get("FORMATBRIDGE_LOG_DIR", "log_dir",
                            _DEFAULTS["log_dir"])
        self.LOG_TO_FILE = _get_bool("FORMATBRIDGE_LOG_TO_FILE", "log_to_file",
                                     _DEFAULTS["log_to_file"])

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)

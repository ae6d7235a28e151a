# =========================================
# 📄 File: config/config_loader.py
# Purpose: Load YAML config (dev/prod), substitute ${ENV_VARS}, validate, and expose helpers
# =========================================

import os                      # Used to read ENV to pick dev/prod and to resolve ${VAR} placeholders
import re                      # Used to find and replace ${VAR} patterns inside YAML text
from pathlib import Path
from typing import Dict, Any, Optional
import yaml                    # Safe YAML parsing (install: PyYAML)

CONFIG_DIR = Path(__file__).resolve().parent
CONFIG_PATH_ENV = "DATAMANAGER_CONFIG"

REQUIRED_STRING_KEYS = ["cluster_url", "data_path", "type_name", "index_name"]


class ConfigError(ValueError):
    """Raised when the configuration file is missing, unparsable or incomplete."""


def _substitute_env_placeholders(yaml_text: str) -> str:
    """
    Replace ${VAR} placeholders in YAML text with their environment variable values.
    If an env var is missing, mark it as <MISSING:VAR> to fail validation cleanly.
    """
    pattern = re.compile(r"\$\{([^}^{]+)\}")
    def repl(match):
        var_name = match.group(1)
        return os.getenv(var_name, f"<MISSING:{var_name}>")
    return pattern.sub(repl, yaml_text)


def _load_yaml_file(path: str) -> Dict[str, Any]:
    """
    Read a YAML file from disk, perform ${VAR} substitution, and parse it to a dict.
    """
    if not os.path.exists(path):
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigError(f"Configuration file unreadable: {path}: {e}") from e

    substituted = _substitute_env_placeholders(raw)

    try:
        cfg = yaml.safe_load(substituted)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parsing error in {path}: {e}") from e

    if not isinstance(cfg, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping, got {type(cfg).__name__}")
    return cfg


def _validate_config(cfg: Dict[str, Any]) -> None:
    """
    Validate presence and types of required keys and ensure no <MISSING:...> placeholders remain.
    """
    missing = [k for k in REQUIRED_STRING_KEYS + ["cache_expiry_minutes"]
               if k not in cfg or cfg[k] in (None, "")]
    if missing:
        raise ConfigError(f"Missing config keys: {', '.join(missing)}")

    # Strings must be real strings with every placeholder resolved
    invalid = [k for k in REQUIRED_STRING_KEYS
               if not isinstance(cfg[k], str) or "MISSING:" in cfg[k]]
    if invalid:
        raise ConfigError(f"Missing/invalid config values: {', '.join(invalid)}")

    expiry = cfg["cache_expiry_minutes"]
    if isinstance(expiry, str):
        # ${VAR} substitution always yields text; accept plain digits
        if not expiry.strip().isdigit():
            raise ConfigError(f"cache_expiry_minutes must be a non-negative integer, got {expiry!r}")
        cfg["cache_expiry_minutes"] = int(expiry)
    elif isinstance(expiry, bool) or not isinstance(expiry, int) or expiry < 0:
        raise ConfigError(f"cache_expiry_minutes must be a non-negative integer, got {expiry!r}")

    timeout = cfg.get("request_timeout_seconds")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"request_timeout_seconds must be a positive number, got {timeout!r}")


def get_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Public API: pick the config file, load YAML, validate, return dict.

    Resolution order: explicit ``path`` argument, then the DATAMANAGER_CONFIG
    environment variable, then config/{ENV}.yaml with ENV defaulting to 'dev'.
    """
    if path is None:
        path = os.getenv(CONFIG_PATH_ENV)
    if path is None:
        env = os.getenv("ENV", "dev").lower()
        path = str(CONFIG_DIR / f"{env}.yaml")
    cfg = _load_yaml_file(path)
    _validate_config(cfg)
    cfg.setdefault("log_level", "INFO")
    return cfg


def build_artifact_path(cfg: Dict[str, Any], filename: str) -> str:
    """
    Helper to build the on-disk path of a cached artifact from the cfg dict.
    """
    return os.path.join(cfg["data_path"], filename)

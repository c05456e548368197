"""
config.py
- Default settings for the portal smoke test
- Loads an optional YAML override file and deep-merges it over the defaults
- Substitutes $NAME placeholders in string values from the environment
- Loads a .env file so credentials can live outside the config
"""

import os
import re
from copy import deepcopy
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv


DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_ORIGIN = "http://localhost:5173"
DEFAULT_TIMEOUT = 30

# simple $NAME placeholder pattern (no braces)
_ENV_PLACEHOLDER_RE = re.compile(r"\$([A-Za-z0-9_]+)")

# environment variable -> (config key, converter)
_ENV_OVERRIDES = {
    "PORTAL_BASE_URL": ("base_url", str),
    "PORTAL_TIMEOUT": ("timeout", float),
    "PORTAL_ORIGIN": ("origin", str),
}

_DEFAULTS: Dict[str, Any] = {
    "base_url": DEFAULT_BASE_URL,
    "timeout": DEFAULT_TIMEOUT,
    "origin": DEFAULT_ORIGIN,
    "registration": {
        "name": "Test User",
        "email": "test@example.com",
        "password": "Test123!",
        "role": "user",
    },
    # tried in order until one succeeds
    "login_candidates": [
        {"label": "admin user", "email": "admin@testportal.com", "password": "Admin123!"},
        {"label": "test user", "email": "test@example.com", "password": "Test123!"},
    ],
    # printed as a reminder at the end of the summary
    "seed_credentials": [
        {"role": "Admin", "email": "admin@testportal.com", "password": "Admin123!"},
        {"role": "Alliance", "email": "alliance@testportal.com", "password": "Alliance123!"},
        {"role": "User", "email": "user@testportal.com", "password": "User123!"},
    ],
}


def default_config() -> Dict[str, Any]:
    """Return a fresh copy of the built-in settings."""
    return deepcopy(_DEFAULTS)


def load_env(path: Optional[str] = None) -> bool:
    """Load KEY=value pairs from path (or the nearest .env above the cwd); existing vars win."""
    return load_dotenv(dotenv_path=path or find_dotenv(usecwd=True), override=False)


def substitute_env(obj: Any, env: Optional[Dict[str, str]] = None) -> Any:
    """
    Recursively substitute $NAME placeholders in strings using env (os.environ by default).
    Unknown names are left untouched.
    """
    if env is None:
        env = dict(os.environ)
    if isinstance(obj, dict):
        return {k: substitute_env(v, env) for k, v in obj.items()}
    if isinstance(obj, list):
        return [substitute_env(v, env) for v in obj]
    if isinstance(obj, str):
        def _repl(m):
            return env.get(m.group(1), m.group(0))
        return _ENV_PLACEHOLDER_RE.sub(_repl, obj)
    return obj


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge override into a copy of base. Lists are replaced, not merged."""
    out = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = merge_config(out[key], value)
        else:
            out[key] = deepcopy(value)
    return out


def coerce_timeout(value: Any) -> Optional[float]:
    """Return value as a positive float (None disables the timeout)."""
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for timeout: {value!r}")
    if timeout <= 0:
        raise ValueError(f"Invalid value for timeout: {value!r} (must be greater than 0)")
    return timeout


def apply_env_overrides(cfg: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    if env is None:
        env = dict(os.environ)
    out = dict(cfg)
    for var, (key, convert) in _ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw in (None, ""):
            continue
        try:
            out[key] = convert(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {var}: {raw!r}")
    return out


def load_config(path: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Build the effective config: defaults, then the YAML file at path (if any),
    then $NAME substitution and PORTAL_* environment overrides.
    Raises ValueError for an unreadable file or a non-positive timeout.
    """
    cfg = default_config()
    if path:
        try:
            with open(path, "rt", encoding="utf-8") as fh:
                loaded = yaml.safe_load(fh) or {}
            if not isinstance(loaded, dict):
                raise ValueError("config file must be a mapping of key -> value")
        except (OSError, yaml.YAMLError, ValueError) as e:
            raise ValueError(f"Failed to load config '{path}': {e}")
        cfg = merge_config(cfg, loaded)
    cfg = substitute_env(cfg, env)
    cfg = apply_env_overrides(cfg, env)
    cfg["base_url"] = str(cfg["base_url"]).rstrip("/")
    cfg["timeout"] = coerce_timeout(cfg.get("timeout"))
    return cfg

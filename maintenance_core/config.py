# =============================================================================
# maintenance_core/config.py
# Runtime Configuration for the Maintenance Registry Data Core
# =============================================================================
"""
Configuration is resolved in this order (first non-empty value wins):

1. Streamlit secrets (.streamlit/secrets.toml)

       [supabase]
       url = "https://your-project.supabase.co"
       key = "your-anon-key"

       [registry]
       db_path = "local_data/maintenance_registry.db"
       cache_ttl_seconds = 30
       remote_timeout_seconds = 5
       log_level = "INFO"

2. Environment variables (a .env file is loaded first):
   SUPABASE_URL, SUPABASE_KEY, REGISTRY_DB_PATH, REGISTRY_CACHE_TTL,
   REGISTRY_REMOTE_TIMEOUT, REGISTRY_LOG_LEVEL

3. Built-in defaults. With no Supabase credentials the registry runs
   entirely off the local mirror ("offline mode").
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import streamlit as st
from dotenv import load_dotenv

from maintenance_core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent / "local_data" / "maintenance_registry.db"
DEFAULT_CACHE_TTL_SECONDS = 30.0
DEFAULT_REMOTE_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class RegistryConfig:
    """Resolved settings for one data service instance."""
    supabase_url: str = ""
    supabase_key: str = ""
    db_path: str = str(DEFAULT_DB_PATH)
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    remote_timeout_seconds: float = DEFAULT_REMOTE_TIMEOUT_SECONDS
    log_level: str = "INFO"
    log_to_file: bool = False

    @property
    def is_remote_configured(self) -> bool:
        """Same acceptance rule the web client used for its Supabase URL."""
        url = self.supabase_url or ""
        return (
            bool(url)
            and bool(self.supabase_key)
            and len(url) > 20
            and "placeholder" not in url
            and url.startswith("https://")
        )

    def with_overrides(self, **overrides: Any) -> RegistryConfig:
        """Return a copy with the given (non-None) fields replaced."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


def _read_streamlit_secrets() -> Dict[str, Dict[str, Any]]:
    """Read the [supabase] and [registry] secret tables if present."""
    sections: Dict[str, Dict[str, Any]] = {}
    try:
        for section in ("supabase", "registry"):
            if section in st.secrets:
                sections[section] = dict(st.secrets[section])
    except Exception as e:
        # No secrets.toml, or not running under Streamlit
        logger.debug(f"Streamlit secrets not available: {e}")
    return sections


def _to_float(value: Any, key: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid numeric value for {key}: {value!r}",
            config_key=key,
            expected_type="float",
        )
    if result < 0:
        raise ConfigurationError(
            f"{key} must not be negative",
            config_key=key,
            expected_type="non-negative float",
        )
    return result


def load_config(env_file: Optional[str] = None) -> RegistryConfig:
    """
    Build a RegistryConfig from Streamlit secrets, the environment and defaults.

    Args:
        env_file: Optional path to a .env file (default: search upwards from cwd)

    Returns:
        RegistryConfig

    Raises:
        ConfigurationError: if a numeric setting cannot be parsed
    """
    load_dotenv(env_file, override=False)

    secrets = _read_streamlit_secrets()
    supabase_secrets = secrets.get("supabase", {})
    registry_secrets = secrets.get("registry", {})

    def pick(secret_value: Any, env_key: str, default: Any) -> Any:
        if secret_value not in (None, ""):
            return secret_value
        env_value = os.getenv(env_key)
        if env_value not in (None, ""):
            return env_value
        return default

    config = RegistryConfig(
        supabase_url=str(pick(supabase_secrets.get("url"), "SUPABASE_URL", "")).strip(),
        supabase_key=str(pick(supabase_secrets.get("key"), "SUPABASE_KEY", "")).strip(),
        db_path=str(pick(registry_secrets.get("db_path"), "REGISTRY_DB_PATH", DEFAULT_DB_PATH)),
        cache_ttl_seconds=_to_float(
            pick(registry_secrets.get("cache_ttl_seconds"), "REGISTRY_CACHE_TTL", DEFAULT_CACHE_TTL_SECONDS),
            "cache_ttl_seconds",
        ),
        remote_timeout_seconds=_to_float(
            pick(registry_secrets.get("remote_timeout_seconds"), "REGISTRY_REMOTE_TIMEOUT", DEFAULT_REMOTE_TIMEOUT_SECONDS),
            "remote_timeout_seconds",
        ),
        log_level=str(pick(registry_secrets.get("log_level"), "REGISTRY_LOG_LEVEL", "INFO")).upper(),
    )

    if config.supabase_url and not config.is_remote_configured:
        logger.warning("Supabase URL is set but not usable; running in offline mode")

    return config

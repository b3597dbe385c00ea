"""
Environment Configuration

This module provides the key/value provider that chain configuration is read
from. Builders never touch os.environ themselves: they receive an
EnvironmentManager, which is either built from an explicit mapping or
snapshotted from the process environment after loading .env files.
"""

import os
import re
import logging
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

# Matches ${VAR_NAME}
_INTERPOLATION_PATTERN = re.compile(r"\$\{([A-Za-z0-9_]+)\}")


def chain_env_key(chain_name: str, suffix: str) -> str:
    """Build a chain-prefixed key, e.g. ('celo', 'rpc') -> 'CELO_RPC'"""
    prefix = re.sub(r"[^A-Za-z0-9]+", "_", chain_name).strip("_").upper()
    return f"{prefix}_{suffix.upper()}"


class EnvironmentManager:
    """
    Read-only key/value provider for configuration input.

    Values are snapshotted at construction, so later changes to the process
    environment do not leak into a configuration being built.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, env_name: str = "development"):
        self.env_name = env_name
        self._values: Dict[str, Any] = dict(values or {})

    @classmethod
    def from_process_env(
        cls,
        env_name: Optional[str] = None,
        base_dir: str = ".",
    ) -> "EnvironmentManager":
        """
        Snapshot the process environment layered over .env files.

        Load order, later wins: .env, .env.<env_name>, .env.local, then
        variables already set in the process.
        """
        env_name = env_name or os.getenv("APP_ENV", "development")
        values: Dict[str, Any] = {}

        for filename in (".env", f".env.{env_name}", ".env.local"):
            path = os.path.join(base_dir, filename)
            if os.path.exists(path):
                values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
                logger.info(f"Loaded environment file {path}")

        values.update(os.environ)
        return cls(values, env_name=env_name)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, treating empty strings as missing"""
        value = self._values.get(key)
        if value is None or value == "":
            return default
        return value

    def get_chain_value(self, chain_name: str, suffix: str, default: Any = None) -> Any:
        """Get a chain-prefixed value such as CELO_RPC"""
        return self.get(chain_env_key(chain_name, suffix), default)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def interpolate_config(self, config_str: str) -> str:
        """Interpolate variables in config string

        Replaces ${VAR_NAME} with the value of VAR_NAME, or an empty string
        when it is not set so that required fields fail validation.
        """
        def replace_var(match):
            var_name = match.group(1)
            value = self.get(var_name)
            if value is None:
                logger.warning(f"Unset variable referenced in config: {var_name}")
                return ""
            return str(value)

        return _INTERPOLATION_PATTERN.sub(replace_var, config_str)

    def with_overrides(self, overrides: Mapping[str, Any]) -> "EnvironmentManager":
        """Return a new provider with some keys replaced"""
        return EnvironmentManager({**self._values, **overrides}, env_name=self.env_name)

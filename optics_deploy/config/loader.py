"""
Configuration Loader

This module provides utilities for loading deploy configurations from JSON
or YAML files, with ${VAR} interpolation from the key/value provider and
schema validation before the builders run.
"""

import os
import json
import logging
from typing import Any, Dict, Optional
from pathlib import Path

import yaml

from .builders import build_deploy_config
from .chain_config_template import DeployConfig
from .environment import EnvironmentManager
from .errors import InvalidConfigFile
from .validators import SecurityPolicy, normalize_field_names, validate_deploy_json

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Loads deploy configuration files for one chain.

    Features:
    - JSON and YAML files
    - ${VAR} interpolation from the provider
    - Schema validation before building
    - Export without the deployer key
    """

    def __init__(
        self,
        env_manager: Optional[EnvironmentManager] = None,
        policy: Optional[SecurityPolicy] = None,
    ):
        self.env = env_manager or EnvironmentManager()
        self.policy = policy
        self.config_cache: Dict[str, DeployConfig] = {}

    def _read(self, path: str) -> str:
        config_path = Path(path)
        if not config_path.exists():
            raise InvalidConfigFile(f"Config file not found: {path}")
        with open(config_path, "r") as f:
            return self.env.interpolate_config(f.read())

    def load_json_config(self, path: str) -> Dict[str, Any]:
        """
        Load and parse a JSON configuration file

        Args:
            path: Path to JSON config file

        Returns:
            Parsed configuration dictionary
        """
        try:
            data = json.loads(self._read(path))
        except json.JSONDecodeError as e:
            raise InvalidConfigFile(f"Invalid JSON in {path}: {e}") from e
        return self._ensure_mapping(data, path)

    def load_yaml_config(self, path: str) -> Dict[str, Any]:
        """
        Load and parse a YAML configuration file

        Args:
            path: Path to YAML config file

        Returns:
            Parsed configuration dictionary
        """
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as e:
            raise InvalidConfigFile(f"Invalid YAML in {path}: {e}") from e
        return self._ensure_mapping(data, path)

    @staticmethod
    def _ensure_mapping(data: Any, path: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise InvalidConfigFile(f"Config file must contain a mapping: {path}")
        return data

    def load_raw(self, path: str) -> Dict[str, Any]:
        """Load a file by extension and normalize its keys"""
        if path.endswith(".json"):
            data = self.load_json_config(path)
        elif path.endswith(".yaml") or path.endswith(".yml"):
            data = self.load_yaml_config(path)
        else:
            raise InvalidConfigFile(f"Unsupported config file format: {path}")
        return normalize_field_names(data)

    def load_deploy_config(self, path: str, use_cache: bool = True) -> DeployConfig:
        """
        Load, validate and build a deploy configuration

        Args:
            path: Path to a JSON or YAML deploy file
            use_cache: Return the previously built config for this path

        Returns:
            Validated DeployConfig

        Raises:
            InvalidConfigFile: unreadable file or schema violations
            ConfigError: any builder failure
        """
        if use_cache and path in self.config_cache:
            return self.config_cache[path]

        data = self.load_raw(path)
        errors = validate_deploy_json(data)
        if errors:
            for error in errors:
                logger.error(f"Deploy config schema error in {path}: {error}")
            raise InvalidConfigFile(f"{path} failed schema validation: {'; '.join(errors)}")

        config = build_deploy_config(data, provider=self.env, policy=self.policy)
        self.config_cache[path] = config
        logger.info(f"Loaded deploy configuration for {config.chain.name} from {path}")
        return config

    def export_config_to_json(self, config: DeployConfig, output_path: str) -> None:
        """
        Export configuration to a JSON file. The deployer key is never written.

        Args:
            config: Deploy configuration
            output_path: Path to output JSON file
        """
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(output_path, "w") as f:
            f.write(config.to_json())

        logger.info(f"Exported configuration to {output_path}")

"""
Configuration Management System

Typed, validated description of one chain and the parameters needed to
deploy the messaging core and the optional token bridge onto it.
"""

# Core configuration types
from .chain_config_template import (
    DeployEnvironment,
    ChainDescriptor, GovernorConfig, CoreSecurityConfig,
    BridgeExtensionConfig, DeployConfig,
)

# Domain identifiers
from .domains import (
    KNOWN_DOMAIN_TAGS, domain_from_tag, tag_from_domain,
    validate_domain, get_domain, get_known_chains, find_domain_collisions,
)

# Errors
from .errors import (
    ConfigError, ConfigValidationError, MissingRequiredField,
    InvalidAddress, InvalidDuration, DuplicateWatcher, InvalidGasBudget,
    InvalidDomain, InvalidEnvironment, InsecureConfiguration, InvalidConfigFile,
)

# Environment management
from .environment import EnvironmentManager, chain_env_key

# Configuration validation
from .validators import (
    PolicyMode, SecurityPolicy, DEFAULT_POLICY,
    validate_core_fields, validate_core_config, validate_deploy_json,
)

# Builders
from .builders import (
    build_chain_descriptor, chain_descriptor_from_env,
    build_core_config, build_bridge_config,
    compose_deploy_config, build_deploy_config,
    deploy_config_from_dict, validate_deploy_config,
)

# Configuration loading
from .loader import ConfigLoader

# Known deployments
from .chain_configurations import get_mainnet_chains, load_chain_deploy_config

__all__ = [
    # Core types
    'DeployEnvironment', 'ChainDescriptor', 'GovernorConfig',
    'CoreSecurityConfig', 'BridgeExtensionConfig', 'DeployConfig',

    # Domains
    'KNOWN_DOMAIN_TAGS', 'domain_from_tag', 'tag_from_domain',
    'validate_domain', 'get_domain', 'get_known_chains', 'find_domain_collisions',

    # Errors
    'ConfigError', 'ConfigValidationError', 'MissingRequiredField',
    'InvalidAddress', 'InvalidDuration', 'DuplicateWatcher', 'InvalidGasBudget',
    'InvalidDomain', 'InvalidEnvironment', 'InsecureConfiguration', 'InvalidConfigFile',

    # Environment management
    'EnvironmentManager', 'chain_env_key',

    # Validation
    'PolicyMode', 'SecurityPolicy', 'DEFAULT_POLICY',
    'validate_core_fields', 'validate_core_config', 'validate_deploy_json',

    # Builders
    'build_chain_descriptor', 'chain_descriptor_from_env',
    'build_core_config', 'build_bridge_config',
    'compose_deploy_config', 'build_deploy_config',
    'deploy_config_from_dict', 'validate_deploy_config',

    # Loading
    'ConfigLoader', 'get_mainnet_chains', 'load_chain_deploy_config',
]

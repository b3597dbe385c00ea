"""
Configuration Builders

Turn raw key/value input into validated configuration values:

- build_chain_descriptor / chain_descriptor_from_env for the network identity
- build_core_config for the messaging core security parameters
- build_bridge_config for the optional token bridge
- compose_deploy_config / build_deploy_config for the combined unit

A builder either returns a complete value or raises. Nothing partially
validated is handed to the deploy pipeline.
"""

from typing import Any, List, Mapping, Optional

import structlog

from .chain_config_template import (
    BridgeExtensionConfig,
    ChainDescriptor,
    CoreSecurityConfig,
    DeployConfig,
)
from .domains import KNOWN_DOMAIN_TAGS, domain_from_tag, validate_domain
from .environment import EnvironmentManager
from .errors import (
    ConfigError,
    ConfigValidationError,
    InvalidConfigFile,
    InvalidDomain,
    MissingRequiredField,
)
from .validators import (
    SecurityPolicy,
    collect_core_fields,
    is_blank,
    normalize_field_names,
)

logger = structlog.get_logger(__name__)


def check_chain_name(name: Any) -> str:
    if is_blank(name):
        raise MissingRequiredField("name")
    if not isinstance(name, str):
        raise InvalidConfigFile(f"Chain name must be a string, got {type(name).__name__}", "name")
    return name


def resolve_domain(name: str, domain: Any = None, domain_tag: Optional[str] = None) -> int:
    """
    Pick the domain for a chain.

    Precedence: explicit domain, explicit tag, registered tag for the chain
    name, then the chain name itself used as a tag.
    """
    if domain is not None:
        if isinstance(domain, str):
            try:
                domain = int(domain, 0)
            except ValueError:
                raise InvalidDomain(f"Domain must be an integer, got {domain!r}") from None
        return validate_domain(domain)
    if domain_tag is not None:
        return domain_from_tag(domain_tag)
    return domain_from_tag(KNOWN_DOMAIN_TAGS.get(name.lower(), name.lower()))


def build_chain_descriptor(
    name: str,
    rpc_endpoint: Optional[str],
    deployer_key: Optional[str] = None,
    domain: Any = None,
    domain_tag: Optional[str] = None,
) -> ChainDescriptor:
    """
    Build a ChainDescriptor.

    Raises immediately on the first problem: without a name or RPC endpoint
    nothing downstream can run, so there is nothing to accumulate.

    Raises:
        MissingRequiredField: name or rpc_endpoint is absent or empty
        InvalidConfigFile: name is not a string
        InvalidDomain: the domain or tag cannot be used
    """
    check_chain_name(name)
    if is_blank(rpc_endpoint):
        raise MissingRequiredField("rpc_endpoint", f"Missing RPC URI for chain {name}")

    descriptor = ChainDescriptor(
        name=name,
        domain=resolve_domain(name, domain, domain_tag),
        rpc_endpoint=str(rpc_endpoint).strip(),
        deployer_key=None if is_blank(deployer_key) else deployer_key,
    )
    logger.debug(
        "Chain descriptor built",
        chain=descriptor.name,
        domain=hex(descriptor.domain),
        has_deployer=descriptor.has_deployer,
    )
    return descriptor


def chain_descriptor_from_env(
    chain_name: str,
    provider: EnvironmentManager,
    domain: Any = None,
    domain_tag: Optional[str] = None,
) -> ChainDescriptor:
    """
    Build a ChainDescriptor from <CHAIN>_RPC, <CHAIN>_DEPLOYER_KEY and,
    when no domain is passed in, <CHAIN>_DOMAIN.
    """
    check_chain_name(chain_name)
    if domain is None:
        domain = provider.get_chain_value(chain_name, "domain")
    return build_chain_descriptor(
        name=chain_name,
        rpc_endpoint=provider.get_chain_value(chain_name, "rpc"),
        deployer_key=provider.get_chain_value(chain_name, "deployer_key"),
        domain=domain,
        domain_tag=domain_tag,
    )


def build_core_config(
    policy: Optional[SecurityPolicy] = None,
    **fields: Any,
) -> CoreSecurityConfig:
    """
    Build a CoreSecurityConfig from keyword fields.

    Every violated rule is collected before raising.

    Raises:
        ConfigValidationError: one or more fields are invalid
    """
    normalized, errors = collect_core_fields(normalize_field_names(fields), policy)
    if errors:
        raise ConfigValidationError(errors, scope="core configuration")
    return CoreSecurityConfig(**normalized)


def build_bridge_config(data: Optional[Mapping[str, Any]] = None) -> BridgeExtensionConfig:
    """Wrap bridge parameters unchanged; None or empty means no bridge"""
    if data is None:
        return BridgeExtensionConfig()
    if isinstance(data, BridgeExtensionConfig):
        return data
    if not isinstance(data, Mapping):
        raise InvalidConfigFile(f"Bridge configuration must be a mapping, got {type(data).__name__}", "bridge")
    return BridgeExtensionConfig(params=data)


def compose_deploy_config(
    chain: ChainDescriptor,
    core: CoreSecurityConfig,
    bridge: Optional[BridgeExtensionConfig] = None,
) -> DeployConfig:
    """Combine already validated parts"""
    config = DeployConfig(chain=chain, core=core, bridge=bridge or BridgeExtensionConfig())
    logger.info(
        "Deploy configuration ready",
        chain=chain.name,
        domain=hex(chain.domain),
        environment=core.environment.value,
        watchers=len(core.watchers),
        deploys_bridge=config.deploys_bridge,
    )
    return config


def build_deploy_config(
    raw: Mapping[str, Any],
    provider: Optional[EnvironmentManager] = None,
    policy: Optional[SecurityPolicy] = None,
) -> DeployConfig:
    """
    Build a DeployConfig from a raw mapping with chain, core and bridge
    sections.

    The chain section is checked first and its error propagates before the
    core section is looked at. When the chain section leaves rpc_endpoint or
    deployer_key out, they are read from the provider under the chain's
    prefix.

    Raises:
        InvalidConfigFile: a section has the wrong shape
        MissingRequiredField, InvalidDomain: chain section problems
        ConfigValidationError: core section problems, all of them
    """
    raw = normalize_field_names(raw)
    if not isinstance(raw, Mapping):
        raise InvalidConfigFile("Deploy configuration must be a mapping")

    chain_section = raw.get("chain") or {}
    core_section = raw.get("core") or {}
    if not isinstance(chain_section, Mapping) or not isinstance(core_section, Mapping):
        raise InvalidConfigFile("chain and core sections must be mappings")

    name = check_chain_name(chain_section.get("name"))
    rpc_endpoint = chain_section.get("rpc_endpoint")
    deployer_key = chain_section.get("deployer_key")
    if provider is not None:
        if is_blank(rpc_endpoint):
            rpc_endpoint = provider.get_chain_value(name, "rpc")
        if is_blank(deployer_key):
            deployer_key = provider.get_chain_value(name, "deployer_key")

    chain = build_chain_descriptor(
        name=name,
        rpc_endpoint=rpc_endpoint,
        deployer_key=deployer_key,
        domain=chain_section.get("domain"),
        domain_tag=chain_section.get("domain_tag"),
    )
    try:
        core = build_core_config(policy=policy, **core_section)
    except ConfigValidationError as e:
        logger.error(
            "Core configuration rejected",
            chain=chain.name,
            fields=e.fields,
            kinds=e.kinds,
        )
        raise
    bridge = build_bridge_config(raw.get("bridge"))
    return compose_deploy_config(chain, core, bridge)


def deploy_config_from_dict(
    data: Mapping[str, Any],
    policy: Optional[SecurityPolicy] = None,
) -> DeployConfig:
    """Inverse of DeployConfig.to_dict(); the deployer key is not restored"""
    return build_deploy_config(data, provider=None, policy=policy)


def validate_deploy_config(
    raw: Mapping[str, Any],
    provider: Optional[EnvironmentManager] = None,
    policy: Optional[SecurityPolicy] = None,
) -> List[ConfigError]:
    """
    Validate without keeping the result

    Returns:
        List of violations (empty if valid)
    """
    try:
        build_deploy_config(raw, provider, policy)
    except ConfigValidationError as e:
        return e.violations
    except ConfigError as e:
        return [e]
    return []

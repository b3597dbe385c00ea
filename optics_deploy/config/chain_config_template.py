"""
Deployment configuration types.

The values here are built and validated by the functions in builders.py;
constructing them directly skips validation.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class DeployEnvironment(Enum):
    """Deployment tiers"""
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)


@dataclass(frozen=True)
class ChainDescriptor:
    """Identity of one network"""
    name: str
    domain: int  # uint32, see domains.py
    rpc_endpoint: str
    # Signing material, kept out of equality and every output path
    deployer_key: Optional[str] = field(default=None, repr=False, compare=False)

    @property
    def has_deployer(self) -> bool:
        return bool(self.deployer_key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "domain": self.domain,
            "rpc_endpoint": self.rpc_endpoint,
        }


@dataclass(frozen=True)
class GovernorConfig:
    """Governance router with override authority"""
    domain: int
    address: str

    def to_dict(self) -> Dict[str, Any]:
        return {"domain": self.domain, "address": self.address}


@dataclass(frozen=True)
class CoreSecurityConfig:
    """Parameters for the messaging core on one chain"""
    environment: DeployEnvironment
    updater: str
    recovery_manager: str
    recovery_timelock: int  # in seconds
    optimistic_seconds: int  # in seconds
    watchers: Tuple[str, ...] = ()
    governor: Optional[GovernorConfig] = None
    process_gas: Optional[int] = None
    reserve_gas: Optional[int] = None

    @property
    def has_fraud_detection(self) -> bool:
        return len(self.watchers) > 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "environment": self.environment.value,
            "updater": self.updater,
            "recovery_manager": self.recovery_manager,
            "recovery_timelock": self.recovery_timelock,
            "optimistic_seconds": self.optimistic_seconds,
            "watchers": list(self.watchers),
        }
        if self.governor is not None:
            data["governor"] = self.governor.to_dict()
        if self.process_gas is not None:
            data["process_gas"] = self.process_gas
        if self.reserve_gas is not None:
            data["reserve_gas"] = self.reserve_gas
        return data


def _freeze(value: Any) -> Any:
    """Copy nested mappings and lists into read-only equivalents"""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class BridgeExtensionConfig:
    """
    Token bridge parameters.

    The shape of the parameters belongs to the bridge module. An empty
    record means the bridge is not deployed on this chain. Nested mappings
    and lists are stored read-only, and to_dict() returns fresh copies.
    """
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        object.__setattr__(self, "params", _freeze(self.params))

    @property
    def enabled(self) -> bool:
        return len(self.params) > 0

    def to_dict(self) -> Dict[str, Any]:
        return _thaw(self.params)


@dataclass(frozen=True)
class DeployConfig:
    """Everything the deploy pipeline needs for one chain"""
    chain: ChainDescriptor
    core: CoreSecurityConfig
    bridge: BridgeExtensionConfig = field(default_factory=BridgeExtensionConfig)

    @property
    def deploys_bridge(self) -> bool:
        return self.bridge.enabled

    def to_dict(self) -> Dict[str, Any]:
        """Plain structure safe to log or export, without the deployer key"""
        return {
            "chain": self.chain.to_dict(),
            "core": self.core.to_dict(),
            "bridge": self.bridge.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], policy=None) -> "DeployConfig":
        """Re-parse and re-validate the output of to_dict()"""
        from .builders import deploy_config_from_dict

        return deploy_config_from_dict(data, policy=policy)

"""
Configuration Validators

This module provides validators for ensuring configuration correctness
and detecting errors early at load time rather than during deployment.
Validators never stop at the first problem: they return every violation
so that an operator can fix a config in one pass.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import jsonschema
import structlog
from web3 import Web3

from .chain_config_template import CoreSecurityConfig, DeployEnvironment, GovernorConfig
from .domains import validate_domain
from .errors import (
    ConfigError,
    DuplicateWatcher,
    InsecureConfiguration,
    InvalidAddress,
    InvalidConfigFile,
    InvalidDomain,
    InvalidDuration,
    InvalidEnvironment,
    InvalidGasBudget,
    MissingRequiredField,
)

logger = structlog.get_logger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_ADDRESS = {"type": "string"}
_NUMBER_OR_NULL = {"type": ["integer", "number", "string", "null"]}

# Structure of a serialized DeployConfig. Value rules (ranges, address
# format) are left to the builders so every violation gets a typed error.
DEPLOY_CONFIG_SCHEMA = {
    "type": "object",
    "required": ["chain", "core"],
    "additionalProperties": False,
    "properties": {
        "chain": {
            "type": "object",
            "required": ["name"],
            "additionalProperties": False,
            "properties": {
                "name": {"type": "string"},
                "domain": _NUMBER_OR_NULL,
                "domain_tag": {"type": ["string", "null"]},
                "rpc_endpoint": {"type": ["string", "null"]},
                "deployer_key": {"type": ["string", "null"]},
            },
        },
        "core": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "environment": {"type": ["string", "null"]},
                "updater": {"type": ["string", "null"]},
                "recovery_manager": {"type": ["string", "null"]},
                "recovery_timelock": _NUMBER_OR_NULL,
                "optimistic_seconds": _NUMBER_OR_NULL,
                "watchers": {"type": "array", "items": _ADDRESS},
                "governor": {
                    "type": ["object", "null"],
                    "required": ["domain", "address"],
                    "properties": {
                        "domain": _NUMBER_OR_NULL,
                        "address": _ADDRESS,
                    },
                },
                "process_gas": _NUMBER_OR_NULL,
                "reserve_gas": _NUMBER_OR_NULL,
            },
        },
        "bridge": {"type": ["object", "null"]},
    },
}


class PolicyMode(Enum):
    """How prod security recommendations are applied"""
    WARN = "warn"        # log and accept
    ENFORCE = "enforce"  # reject with InsecureConfiguration


@dataclass(frozen=True)
class SecurityPolicy:
    """
    Recommendations for tiers where security matters.

    A zero recovery timelock, a zero optimistic window or an empty watcher
    set are legal on their own. In the environments listed here they are
    either logged or rejected, depending on mode.
    """
    mode: PolicyMode = PolicyMode.WARN
    require_recovery_timelock: bool = True
    require_optimistic_window: bool = True
    require_watchers: bool = True
    environments: Tuple[DeployEnvironment, ...] = (DeployEnvironment.PROD,)

    @classmethod
    def enforcing(cls) -> "SecurityPolicy":
        return cls(mode=PolicyMode.ENFORCE)

    def applies_to(self, environment: Optional[DeployEnvironment]) -> bool:
        return environment in self.environments


DEFAULT_POLICY = SecurityPolicy()


def to_snake_case(name: str) -> str:
    """Convert camelCase keys such as recoveryTimelock to snake_case"""
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()


# Names used by the JS deploy tooling that differ beyond casing
_FIELD_ALIASES = {"rpc": "rpc_endpoint"}


def normalize_field_names(data: Any) -> Any:
    """Recursively rename camelCase keys to snake_case (bridge params excluded)"""
    if not isinstance(data, Mapping):
        return data
    normalized = {}
    for key, value in data.items():
        name = to_snake_case(key) if isinstance(key, str) else key
        name = _FIELD_ALIASES.get(name, name)
        normalized[name] = value if name == "bridge" else normalize_field_names(value)
    return normalized


def validate_deploy_json(data: Any) -> List[str]:
    """
    Validate a raw deploy configuration against DEPLOY_CONFIG_SCHEMA

    Args:
        data: Parsed JSON/YAML content with snake_case keys

    Returns:
        List of validation error messages (empty if valid)
    """
    validator = jsonschema.Draft7Validator(DEPLOY_CONFIG_SCHEMA)
    errors = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
        location = ".".join(str(part) for part in error.path) or "<root>"
        errors.append(f"{location}: {error.message}")
    return errors


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_address(field: str, value: Any) -> str:
    """
    Check a required address and return it in checksum form

    Raises:
        MissingRequiredField: value is absent or empty
        InvalidAddress: value is not a 0x-prefixed 20-byte address, has a
            bad checksum, or is the zero address
    """
    if is_blank(value):
        raise MissingRequiredField(field)
    if not isinstance(value, str) or not value.startswith("0x") or not Web3.is_address(value):
        raise InvalidAddress(field, value)
    digits = value[2:]
    if digits not in (digits.lower(), digits.upper()) and not Web3.is_checksum_address(value):
        raise InvalidAddress(field, value)
    checksummed = Web3.to_checksum_address(value)
    if checksummed == ZERO_ADDRESS:
        raise InvalidAddress(field, value)
    return checksummed


_INTEGER_STRING = re.compile(r"\s*[+-]?[0-9]+\s*")


def parse_integer(value: Any) -> Any:
    """Convert a decimal integer string (e.g. from an env var) to int; leave anything else as is"""
    if isinstance(value, str) and _INTEGER_STRING.fullmatch(value):
        return int(value)
    return value


def check_duration(field: str, value: Any) -> int:
    """Check a required duration in seconds"""
    if is_blank(value):
        raise MissingRequiredField(field)
    value = parse_integer(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidDuration(field, value)
    return value


def check_gas(field: str, value: Any, minimum: int) -> Optional[int]:
    """Check an optional gas budget against its lower bound"""
    if is_blank(value):
        return None
    value = parse_integer(value)
    requirement = "a positive integer" if minimum > 0 else "a non-negative integer"
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidGasBudget(field, value, requirement)
    return value


def check_environment(value: Any) -> DeployEnvironment:
    if isinstance(value, DeployEnvironment):
        return value
    if is_blank(value):
        raise MissingRequiredField("environment")
    try:
        return DeployEnvironment(str(value).lower())
    except ValueError:
        raise InvalidEnvironment(value, DeployEnvironment.values()) from None


def check_watchers(values: Any) -> Tuple[Tuple[str, ...], List[ConfigError]]:
    """
    Check every watcher address and reject repeats.

    Duplicates are compared after checksum normalization, so the same
    address written in two casings counts as a repeat. Duplicates are
    reported, never dropped.
    """
    if values is None:
        return (), []
    if isinstance(values, str) or not isinstance(values, Iterable):
        return (), [InvalidAddress("watchers", values)]

    watchers: List[str] = []
    errors: List[ConfigError] = []
    seen = set()
    for index, value in enumerate(values):
        try:
            address = check_address(f"watchers[{index}]", value)
        except ConfigError as e:
            errors.append(e)
            continue
        if address in seen:
            errors.append(DuplicateWatcher(address))
            continue
        seen.add(address)
        watchers.append(address)
    return tuple(watchers), errors


def check_governor(value: Any) -> Optional[GovernorConfig]:
    if value is None:
        return None
    if isinstance(value, GovernorConfig):
        value = value.to_dict()
    if not isinstance(value, Mapping):
        raise InvalidAddress("governor", value)
    domain = value.get("domain")
    try:
        validate_domain(domain)
    except InvalidDomain as e:
        raise InvalidDomain(e.message, "governor.domain") from None
    return GovernorConfig(domain=domain, address=check_address("governor.address", value.get("address")))


def check_security_policy(
    environment: Optional[DeployEnvironment],
    recovery_timelock: Optional[int],
    optimistic_seconds: Optional[int],
    watchers: Tuple[str, ...],
    policy: SecurityPolicy = DEFAULT_POLICY,
) -> List[ConfigError]:
    """
    Apply the prod security recommendations

    Returns:
        InsecureConfiguration errors when the policy enforces, otherwise an
        empty list after logging a warning per finding
    """
    if not policy.applies_to(environment):
        return []

    findings = []
    if policy.require_recovery_timelock and recovery_timelock == 0:
        findings.append(("recovery_timelock", "zero recovery timelock lets a recovery execute before watchers can react"))
    if policy.require_optimistic_window and optimistic_seconds == 0:
        findings.append(("optimistic_seconds", "zero optimistic window makes roots final with no chance to challenge"))
    if policy.require_watchers and not watchers:
        findings.append(("watchers", "no watchers configured, fraudulent updates cannot be challenged"))

    if policy.mode is PolicyMode.ENFORCE:
        return [InsecureConfiguration(message, field) for field, message in findings]

    for field, message in findings:
        logger.warning(
            "Insecure configuration accepted",
            environment=environment.value,
            field=field,
            reason=message,
        )
    return []


CORE_FIELDS = frozenset(DEPLOY_CONFIG_SCHEMA["properties"]["core"]["properties"])


def collect_core_fields(
    fields: Mapping[str, Any],
    policy: Optional[SecurityPolicy] = None,
) -> Tuple[Dict[str, Any], List[ConfigError]]:
    """
    Validate and normalize raw core fields

    Args:
        fields: snake_case field mapping
        policy: Security policy, DEFAULT_POLICY when omitted

    Returns:
        Tuple of (normalized fields, list of violations)
    """
    policy = policy or DEFAULT_POLICY
    normalized: Dict[str, Any] = {}
    errors: List[ConfigError] = [
        InvalidConfigFile(f"Unknown core field {key!r}", str(key))
        for key in fields
        if key not in CORE_FIELDS
    ]

    checks = [
        ("environment", lambda: check_environment(fields.get("environment"))),
        ("updater", lambda: check_address("updater", fields.get("updater"))),
        ("recovery_manager", lambda: check_address("recovery_manager", fields.get("recovery_manager"))),
        ("recovery_timelock", lambda: check_duration("recovery_timelock", fields.get("recovery_timelock"))),
        ("optimistic_seconds", lambda: check_duration("optimistic_seconds", fields.get("optimistic_seconds"))),
        ("governor", lambda: check_governor(fields.get("governor"))),
        ("process_gas", lambda: check_gas("process_gas", fields.get("process_gas"), minimum=1)),
        ("reserve_gas", lambda: check_gas("reserve_gas", fields.get("reserve_gas"), minimum=0)),
    ]
    for name, check in checks:
        try:
            normalized[name] = check()
        except ConfigError as e:
            errors.append(e)

    watchers, watcher_errors = check_watchers(fields.get("watchers"))
    normalized["watchers"] = watchers
    errors.extend(watcher_errors)

    errors.extend(
        check_security_policy(
            normalized.get("environment"),
            normalized.get("recovery_timelock"),
            normalized.get("optimistic_seconds"),
            watchers,
            policy,
        )
    )
    return normalized, errors


def validate_core_fields(
    fields: Mapping[str, Any],
    policy: Optional[SecurityPolicy] = None,
) -> List[ConfigError]:
    """Validate raw core fields, returning every violation"""
    return collect_core_fields(fields, policy)[1]


def validate_core_config(
    config: CoreSecurityConfig,
    policy: Optional[SecurityPolicy] = None,
) -> List[ConfigError]:
    """
    Validate a CoreSecurityConfig instance, e.g. one constructed directly

    Args:
        config: Core configuration to validate

    Returns:
        List of violations (empty if valid)
    """
    fields = config.to_dict()
    fields["environment"] = config.environment
    return validate_core_fields(fields, policy)

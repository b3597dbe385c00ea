"""
Configuration Errors

Every failure raised while building a deployment configuration derives from
ConfigError. Validators collect individual errors into lists; builders raise
ConfigValidationError so that a single report carries every violation.
"""

from typing import List, Optional, Sequence


class ConfigError(Exception):
    """Base class for configuration errors"""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)

    @property
    def kind(self) -> str:
        return self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.kind}(field={self.field!r}, message={self.message!r})"


class MissingRequiredField(ConfigError):
    """A mandatory field is absent or empty"""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Missing required field: {field}", field)


class InvalidAddress(ConfigError):
    """An address string failed format validation"""

    def __init__(self, field: str, value: object):
        self.value = value
        super().__init__(f"Invalid address for {field}: {value!r}", field)


class InvalidDuration(ConfigError):
    """A timelock or delay is negative or not a whole number of seconds"""

    def __init__(self, field: str, value: object):
        self.value = value
        super().__init__(
            f"{field} must be a non-negative integer number of seconds, got {value!r}",
            field,
        )


class DuplicateWatcher(ConfigError):
    """The watcher set repeats an address"""

    def __init__(self, address: str, field: str = "watchers"):
        self.address = address
        super().__init__(f"Duplicate watcher address: {address}", field)


class InvalidGasBudget(ConfigError):
    """A gas budget is not an integer or is outside its allowed range"""

    def __init__(self, field: str, value: object, requirement: str):
        self.value = value
        super().__init__(f"{field} must be {requirement}, got {value!r}", field)


class InvalidDomain(ConfigError):
    """A domain identifier or domain tag cannot be used"""

    def __init__(self, message: str, field: str = "domain"):
        super().__init__(message, field)


class InvalidEnvironment(ConfigError):
    """The environment tag is outside the supported set"""

    def __init__(self, value: object, supported: Sequence[str]):
        self.value = value
        super().__init__(
            f"Invalid environment {value!r}, expected one of {list(supported)}",
            "environment",
        )


class InsecureConfiguration(ConfigError):
    """A prod deployment breaks the enforced security policy"""


class InvalidConfigFile(ConfigError):
    """A deploy file or raw mapping has the wrong structure"""


class ConfigValidationError(ConfigError):
    """
    Aggregate of every violation found while validating one configuration.

    Attributes:
        violations: The individual errors, in the order they were detected.
    """

    def __init__(self, violations: Sequence[ConfigError], scope: str = "configuration"):
        self.violations: List[ConfigError] = list(violations)
        self.scope = scope
        details = "; ".join(v.message for v in self.violations)
        super().__init__(
            f"Invalid {scope} ({len(self.violations)} violation(s)): {details}"
        )

    @property
    def fields(self) -> List[Optional[str]]:
        return [v.field for v in self.violations]

    @property
    def kinds(self) -> List[str]:
        return [v.kind for v in self.violations]

    def has(self, error_type: type) -> bool:
        """Check whether any violation is an instance of error_type"""
        return any(isinstance(v, error_type) for v in self.violations)

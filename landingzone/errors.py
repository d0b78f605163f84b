"""Error types raised while loading, compiling and executing a landing-zone plan."""
from typing import Optional


class LandingZoneError(Exception):
    """Base class for all landing-zone errors."""


class ConfigurationError(LandingZoneError):
    """A required configuration field is missing or malformed."""


class RuleReferenceError(LandingZoneError):
    """A subnet references an NSG rule that is not defined in custom_nsg_rules."""

    def __init__(self, rule_name: str, subnet_name: str):
        self.rule_name = rule_name
        self.subnet_name = subnet_name
        super().__init__(
            f"NSG rule '{rule_name}' referenced by subnet '{subnet_name}' "
            f"is not defined in custom_nsg_rules"
        )


class RoleNotFoundError(LandingZoneError):
    """No resource group declares the requested role."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"No resource group with type '{role}' found")


class ExecutionError(LandingZoneError):
    """The provisioning tool failed for an operation in apply mode."""

    def __init__(self, operation, reason: str, index: Optional[int] = None):
        self.operation = operation
        self.reason = reason
        self.index = index
        super().__init__(f"{operation.describe()} failed: {reason}")

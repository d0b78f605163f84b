"""Resolution of symbolic references inside a configuration."""
from typing import Dict, List, Optional

from ..config.schema import Configuration, NsgRuleDefinition
from ..errors import RoleNotFoundError, RuleReferenceError
from ..naming.engine import NamingEngine

# Rule entries that explicitly mean "no rule"
EMPTY_RULE_MARKERS = {"", "null", "undefined"}


def is_empty_rule(entry: Optional[str]) -> bool:
    """Check whether a subnet rule entry is the "no rule" sentinel."""
    return entry is None or entry.strip() in EMPTY_RULE_MARKERS


class ReferenceResolver:
    """Resolves resource-group roles and NSG rule names to concrete values."""

    def __init__(self, config: Configuration, naming: NamingEngine, debug: bool = False):
        self.config = config
        self.naming = naming
        self.debug = debug
        self.warnings: List[str] = []
        self._roles: Dict[str, str] = {}

    def resolve_role_rg(self, role: str) -> str:
        """Render the name of the resource group declaring ``role``.

        The first group in document order wins; duplicates are reported once
        as a warning.

        Raises:
            RoleNotFoundError: If no resource group has the role.
        """
        if role in self._roles:
            return self._roles[role]

        matches = [rg for rg in self.config.resource_groups if rg.type == role]
        if not matches:
            raise RoleNotFoundError(role)

        name = self.naming.resource_group(matches[0].name)
        if len(matches) > 1:
            others = ", ".join(rg.name for rg in matches[1:])
            self.warnings.append(
                f"Multiple resource groups with type '{role}'; using '{matches[0].name}' and ignoring: {others}"
            )
        if self.debug:
            print(f"Debug: Resolved role '{role}' to resource group {name}")

        self._roles[role] = name
        return name

    def resolve_rule(self, rule_name: str, subnet_name: str) -> NsgRuleDefinition:
        """Look up an NSG rule definition by name.

        Args:
            rule_name: Symbolic rule name from a subnet's nsg_rules list.
            subnet_name: Rendered subnet name, used in the error message.

        Raises:
            RuleReferenceError: If the rule is not defined.
        """
        try:
            return self.config.custom_nsg_rules[rule_name]
        except KeyError:
            raise RuleReferenceError(rule_name, subnet_name) from None

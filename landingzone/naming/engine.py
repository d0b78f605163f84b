"""Resource name rendering from templates."""
import re
from typing import Dict

from .context import OrganizationContext
from ..config.schema import NamingPatterns

PLACEHOLDER = re.compile(r"\{(\w+)\}")
DEFAULT_SUFFIX = "01"


def render_name(template: str, name: str, context: OrganizationContext, suffix: str = DEFAULT_SUFFIX) -> str:
    """Render a resource name from a naming template.

    Supports ``{region}``, ``{org}``, ``{pattern}`` and ``{name}``. Unknown
    placeholders are kept as written so that typos show up in plan output.

    Args:
        template: Naming template, e.g. ``rg-{region}-{org}-{pattern}-{name}``.
        name: Logical name from the configuration.
        context: Organization context supplying the other tokens.
        suffix: Appended after the rendered template; ``-`` is prefixed if missing.

    Returns:
        str: Rendered name, e.g. ``rg-weu-vks-s1-landingzone-01``.
    """
    if not template:
        raise ValueError("Naming template must be a non-empty string")

    if suffix and not suffix.startswith("-"):
        suffix = f"-{suffix}"

    tokens: Dict[str, str] = {
        "region": context.region_short,
        "org": context.org,
        "pattern": context.pattern,
        "name": name,
    }
    # One pass over the template: substituted values are never re-scanned
    rendered = PLACEHOLDER.sub(lambda m: tokens.get(m.group(1), m.group(0)), template)
    return f"{rendered}{suffix or ''}"


class NamingEngine:
    """Renders names for every resource category of a landing zone."""

    def __init__(self, context: OrganizationContext, patterns: NamingPatterns):
        self.context = context
        self.patterns = patterns

    def render(self, template: str, name: str, suffix: str = DEFAULT_SUFFIX) -> str:
        return render_name(template, name, self.context, suffix)

    def resource_group(self, name: str) -> str:
        return self.render(self.patterns.resource_group, name)

    def vnet(self, name: str) -> str:
        return self.render(self.patterns.vnet, name)

    def subnet(self, name: str) -> str:
        return self.render(self.patterns.subnet, name)

    def perimeter(self, name: str) -> str:
        return self.render(self.patterns.nsp, name)

    def workspace(self, name: str) -> str:
        return self.render(self.patterns.law, name)

    def storage_account(self, name: str) -> str:
        """Storage account names allow no hyphens."""
        return self.render(self.patterns.storage, name).replace("-", "")

    @staticmethod
    def nsg(subnet_name: str) -> str:
        return f"nsg-{subnet_name}"

    @staticmethod
    def flow_log(vnet_name: str) -> str:
        return f"flow-{vnet_name}"

"""Organization context shared by naming, resolution and compilation."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from ..config.schema import Configuration
from ..errors import ConfigurationError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class OrganizationContext:
    """Per-run values read by every naming call. Never modified after construction."""
    org: str
    pattern: str
    region: str
    region_short: str
    tags: Tuple[Tuple[str, str], ...] = ()
    deployed_at: str = ""

    @classmethod
    def from_configuration(
        cls,
        config: Configuration,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "OrganizationContext":
        """Build the context from a validated configuration.

        Args:
            config: Parsed configuration.
            clock: Returns the current UTC time; defaults to ``datetime.now(timezone.utc)``.

        Raises:
            ConfigurationError: If the region has no short code in region_map.
        """
        region_short = config.region_map.get(config.region)
        if not region_short:
            raise ConfigurationError(f"region_map.{config.region} missing")

        now = clock() if clock else datetime.now(timezone.utc)
        return cls(
            org=config.organization_name,
            pattern=config.pattern_type,
            region=config.region,
            region_short=region_short,
            tags=tuple(config.tags.items()),
            deployed_at=now.strftime(TIMESTAMP_FORMAT),
        )

    @property
    def tag_args(self) -> List[str]:
        """Tags as ``key=value`` pairs with ``deployed_at`` appended last."""
        pairs = [f"{key}={value}" for key, value in self.tags]
        if self.deployed_at:
            pairs.append(f"deployed_at={self.deployed_at}")
        return pairs

"""Pydantic models for landing-zone configuration validation."""
from typing import Dict, List, Optional, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


def _as_str(value):
    """Coerce YAML scalars (ports, tag values) to strings."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class NamingPatterns(BaseModel):
    """Name templates per resource category."""
    resource_group: str = Field(min_length=1)
    vnet: str = Field(min_length=1)
    subnet: str = Field(min_length=1)
    nsp: str = Field(min_length=1)
    law: str = Field(min_length=1)
    storage: str = Field(min_length=1)


class ResourceGroupSpec(BaseModel):
    """Resource group with an optional role tag."""
    name: str
    type: Optional[str] = None


class NsgRuleDefinition(BaseModel):
    """Entry of the custom_nsg_rules table."""
    priority: int = Field(ge=100, le=4096)
    protocol: str
    direction: str
    source: str = "*"
    source_ports: str = "*"
    destination: str = "*"
    destination_ports: str = "*"
    access: str = "Allow"

    @field_validator("source", "source_ports", "destination", "destination_ports", mode="before")
    @classmethod
    def _stringify(cls, value):
        return _as_str(value)


class SubnetSpec(BaseModel):
    """Subnet definition."""
    name: str
    cidr: str
    nsg_rules: List[Optional[str]] = Field(default_factory=list)

    @field_validator("nsg_rules", mode="before")
    @classmethod
    def _null_rules(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class VNetSpec(BaseModel):
    """Virtual network definition."""
    name: str
    cidr: str
    subnets: List[SubnetSpec] = Field(default_factory=list)

    @field_validator("subnets", mode="before")
    @classmethod
    def _null_subnets(cls, value):
        return [] if value is None else value


class PerimeterRule(BaseModel):
    """Allow-list of source prefixes for a perimeter access rule."""
    source: List[str]

    @field_validator("source", mode="before")
    @classmethod
    def _single_prefix(cls, value):
        if isinstance(value, str):
            return value.split()
        return value


class Configuration(BaseModel):
    """Root landing-zone configuration schema."""
    model_config = ConfigDict(populate_by_name=True)

    organization_name: str
    pattern_type: str
    region: str
    region_map: Dict[str, str]
    naming: NamingPatterns
    subscription: Optional[str] = None
    tags: Dict[str, str] = Field(default_factory=dict)
    resource_groups: List[ResourceGroupSpec] = Field(default_factory=list)
    vnets: List[VNetSpec] = Field(default_factory=list)
    custom_nsg_rules: Dict[str, NsgRuleDefinition] = Field(default_factory=dict)
    nsp: Optional[str] = None
    custom_nsp_rules: Dict[str, PerimeterRule] = Field(default_factory=dict)
    log_analytics_workspace: Optional[str] = None
    diagnostics_storage_account: Optional[str] = None
    is_network_watcher_needed: bool = False
    is_diagnostics_enabled: bool = False
    is_dashboard_needed: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_dashboard_needed", "is_dashbord_needed"),
    )
    dashboard_file: Optional[str] = None

    @field_validator("tags", "custom_nsg_rules", "custom_nsp_rules", "region_map", mode="before")
    @classmethod
    def _null_mapping(cls, value):
        return {} if value is None else value

    @field_validator("resource_groups", "vnets", mode="before")
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value

    @field_validator("resource_groups", mode="before")
    @classmethod
    def _bare_group_names(cls, value):
        if not isinstance(value, list):
            return [] if value is None else value
        # Older layouts list resource groups as plain names
        return [{"name": item} if isinstance(item, str) else item for item in value]

    @field_validator("tags", mode="before")
    @classmethod
    def _stringify_tags(cls, value):
        if not isinstance(value, dict):
            return {} if value is None else value
        return {str(k): _as_str(v) for k, v in value.items()}

    @field_validator("is_network_watcher_needed", "is_diagnostics_enabled", "is_dashboard_needed", mode="before")
    @classmethod
    def _null_toggle(cls, value):
        return False if value is None else value

    @model_validator(mode="after")
    def _check_references(self) -> "Configuration":
        if self.region not in self.region_map:
            raise ValueError(f"region_map.{self.region} missing")
        if self.is_diagnostics_enabled:
            if not self.log_analytics_workspace:
                raise ValueError("log_analytics_workspace is required when is_diagnostics_enabled is set")
            if not self.diagnostics_storage_account:
                raise ValueError("diagnostics_storage_account is required when is_diagnostics_enabled is set")
        return self

    @property
    def monitoring_enabled(self) -> bool:
        """True when any monitoring resource is requested."""
        return bool(
            self.log_analytics_workspace
            or self.is_network_watcher_needed
            or self.is_diagnostics_enabled
            or self.is_dashboard_needed
        )

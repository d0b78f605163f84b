"""Data models for compiled provisioning plans."""
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping


class OperationKind(str, Enum):
    """Kinds of provisioning operations, in the order phases emit them."""
    CREATE_RESOURCE_GROUP = "create-resource-group"
    CREATE_VNET = "create-vnet"
    CREATE_NSG = "create-nsg"
    CREATE_NSG_RULE = "create-nsg-rule"
    CREATE_SUBNET = "create-subnet"
    CREATE_PERIMETER = "create-perimeter"
    CREATE_PERIMETER_PROFILE = "create-perimeter-profile"
    CREATE_PERIMETER_RULE = "create-perimeter-rule"
    CREATE_WORKSPACE = "create-workspace"
    CONFIGURE_NETWORK_WATCHER = "configure-network-watcher"
    CREATE_STORAGE_ACCOUNT = "create-storage-account"
    CREATE_FLOW_LOG = "create-flow-log"
    CREATE_DIAGNOSTIC_SETTINGS = "create-diagnostic-settings"
    CREATE_DASHBOARD = "create-dashboard"


@dataclass(frozen=True)
class Operation:
    """A single unit of provisioning work."""
    kind: OperationKind
    name: str
    resource_group: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def describe(self) -> str:
        """Short identification used in logs and errors."""
        return f"{self.kind.value} '{self.name}' (resource group '{self.resource_group}')"


class Plan(Sequence):
    """Ordered operations produced by the compiler, plus its warnings."""

    def __init__(self, operations: List[Operation], warnings: List[str] = None):
        self._operations = tuple(operations)
        self.warnings = list(warnings or [])

    def __getitem__(self, index):
        return self._operations[index]

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations)

    def of_kind(self, kind: OperationKind) -> List[Operation]:
        return [op for op in self._operations if op.kind == kind]

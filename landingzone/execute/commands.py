"""Azure CLI command rendering for plan operations."""
import json
from typing import Callable, Dict, List, Optional

from ..plan.models import Operation, OperationKind

SUBSCRIPTION_PLACEHOLDER = "<subscription-id>"
WORKSPACE_TYPE = "Microsoft.OperationalInsights/workspaces"
STORAGE_TYPE = "Microsoft.Storage/storageAccounts"
ALL_LOGS = [{"categoryGroup": "allLogs", "enabled": True}]


class AzureCommandBuilder:
    """Builds ``az`` argument vectors, one builder per operation kind."""

    def __init__(self, subscription_id: Optional[str] = None,
                 subscription_lookup: Optional[Callable[[], str]] = None):
        """Initialize the builder.

        Args:
            subscription_id: Subscription used in resource ids.
            subscription_lookup: Called once, only when a resource id is needed
                and no subscription_id was given.
        """
        self.subscription_id = subscription_id
        self.subscription_lookup = subscription_lookup

        self.builders: Dict[OperationKind, Callable[[Operation], List[str]]] = {
            OperationKind.CREATE_RESOURCE_GROUP: self._resource_group,
            OperationKind.CREATE_VNET: self._vnet,
            OperationKind.CREATE_NSG: self._nsg,
            OperationKind.CREATE_NSG_RULE: self._nsg_rule,
            OperationKind.CREATE_SUBNET: self._subnet,
            OperationKind.CREATE_PERIMETER: self._perimeter,
            OperationKind.CREATE_PERIMETER_PROFILE: self._perimeter_profile,
            OperationKind.CREATE_PERIMETER_RULE: self._perimeter_rule,
            OperationKind.CREATE_WORKSPACE: self._workspace,
            OperationKind.CONFIGURE_NETWORK_WATCHER: self._network_watcher,
            OperationKind.CREATE_STORAGE_ACCOUNT: self._storage_account,
            OperationKind.CREATE_FLOW_LOG: self._flow_log,
            OperationKind.CREATE_DIAGNOSTIC_SETTINGS: self._diagnostic_settings,
            OperationKind.CREATE_DASHBOARD: self._dashboard,
        }

    def build(self, operation: Operation) -> List[str]:
        """Render the ``az`` command for an operation.

        Raises:
            ValueError: If the operation kind has no builder.
        """
        builder = self.builders.get(operation.kind)
        if not builder:
            raise ValueError(f"Unsupported operation kind: {operation.kind}")
        return builder(operation)

    def resource_id(self, resource_group: str, resource_type: str, name: str) -> str:
        return (f"/subscriptions/{self._subscription()}/resourceGroups/{resource_group}"
                f"/providers/{resource_type}/{name}")

    def _subscription(self) -> str:
        if not self.subscription_id and self.subscription_lookup:
            self.subscription_id = self.subscription_lookup()
            self.subscription_lookup = None
        return self.subscription_id or SUBSCRIPTION_PLACEHOLDER

    @staticmethod
    def _tags(operation: Operation) -> List[str]:
        tags = list(operation.params.get("tags", ()))
        return ["--tags", *tags] if tags else []

    def _resource_group(self, op: Operation) -> List[str]:
        return ["az", "group", "create",
                "--name", op.name,
                "--location", op.params["location"],
                *self._tags(op)]

    def _vnet(self, op: Operation) -> List[str]:
        return ["az", "network", "vnet", "create",
                "--resource-group", op.resource_group,
                "--name", op.name,
                "--address-prefix", op.params["address_prefix"],
                *self._tags(op)]

    def _nsg(self, op: Operation) -> List[str]:
        return ["az", "network", "nsg", "create",
                "--resource-group", op.resource_group,
                "--name", op.name,
                *self._tags(op)]

    def _nsg_rule(self, op: Operation) -> List[str]:
        p = op.params
        return ["az", "network", "nsg", "rule", "create",
                "--resource-group", op.resource_group,
                "--nsg-name", p["nsg_name"],
                "--name", op.name,
                "--priority", str(p["priority"]),
                "--protocol", p["protocol"],
                "--direction", p["direction"],
                "--source-address-prefix", p["source"],
                "--source-port-range", p["source_ports"],
                "--destination-address-prefix", p["destination"],
                "--destination-port-range", p["destination_ports"],
                "--access", p["access"]]

    def _subnet(self, op: Operation) -> List[str]:
        p = op.params
        return ["az", "network", "vnet", "subnet", "create",
                "--resource-group", op.resource_group,
                "--vnet-name", p["vnet_name"],
                "--name", op.name,
                "--address-prefixes", p["address_prefix"],
                "--network-security-group", p["nsg_name"]]

    def _perimeter(self, op: Operation) -> List[str]:
        return ["az", "network", "perimeter", "create",
                "--name", op.name,
                "--resource-group", op.resource_group,
                "--location", op.params["location"],
                *self._tags(op)]

    def _perimeter_profile(self, op: Operation) -> List[str]:
        return ["az", "network", "perimeter", "profile", "create",
                "--name", op.name,
                "--perimeter-name", op.params["perimeter_name"],
                "--resource-group", op.resource_group]

    def _perimeter_rule(self, op: Operation) -> List[str]:
        p = op.params
        return ["az", "network", "perimeter", "profile", "access-rule", "create",
                "--name", op.name,
                "--profile-name", p["profile_name"],
                "--perimeter-name", p["perimeter_name"],
                "--resource-group", op.resource_group,
                "--address-prefixes", *p["address_prefixes"]]

    def _workspace(self, op: Operation) -> List[str]:
        return ["az", "monitor", "log-analytics", "workspace", "create",
                "--resource-group", op.resource_group,
                "--workspace-name", op.name,
                "--location", op.params["location"],
                *self._tags(op)]

    def _network_watcher(self, op: Operation) -> List[str]:
        return ["az", "network", "watcher", "configure",
                "--resource-group", op.resource_group,
                "--locations", op.params["location"],
                "--enabled", "true"]

    def _storage_account(self, op: Operation) -> List[str]:
        p = op.params
        return ["az", "storage", "account", "create",
                "--name", op.name,
                "--resource-group", op.resource_group,
                "--location", p["location"],
                "--sku", p["sku"],
                "--kind", p["storage_kind"],
                *self._tags(op)]

    def _flow_log(self, op: Operation) -> List[str]:
        p = op.params
        monitor_rg = p["monitor_resource_group"]
        return ["az", "network", "watcher", "flow-log", "create",
                "--location", p["location"],
                "--resource-group", op.resource_group,
                "--name", op.name,
                "--vnet", p["vnet_name"],
                "--storage-account", self.resource_id(monitor_rg, STORAGE_TYPE, p["storage_account"]),
                "--traffic-analytics", "true",
                "--workspace", self.resource_id(monitor_rg, WORKSPACE_TYPE, p["workspace"]),
                "--retention", str(p["retention_days"]),
                "--interval", str(p["interval_minutes"])]

    def _diagnostic_settings(self, op: Operation) -> List[str]:
        p = op.params
        return ["az", "monitor", "diagnostic-settings", "create",
                "--name", op.name,
                "--resource", p["resource_name"],
                "--resource-group", op.resource_group,
                "--resource-type", p["resource_type"],
                "--workspace", self.resource_id(p["monitor_resource_group"], WORKSPACE_TYPE, p["workspace"]),
                "--logs", json.dumps(ALL_LOGS),
                "--output", "none"]

    def _dashboard(self, op: Operation) -> List[str]:
        return ["az", "portal", "dashboard", "create",
                "--resource-group", op.resource_group,
                "--name", op.name,
                "--input-path", op.params["input_path"],
                "--location", op.params["location"]]

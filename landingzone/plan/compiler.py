"""Compiles a landing-zone configuration into an ordered operation plan."""
from typing import List, Optional

from .models import Operation, OperationKind, Plan
from .resolver import ReferenceResolver, is_empty_rule
from ..config.schema import Configuration
from ..errors import RoleNotFoundError
from ..naming.context import OrganizationContext
from ..naming.engine import NamingEngine

NETWORK_ROLE = "network"
MONITOR_ROLE = "monitor"
PERIMETER_PROFILE = "defaultProfile"
DIAGNOSTIC_SETTINGS_NAME = "diag-set-01"
FLOW_LOG_RETENTION_DAYS = 30
FLOW_LOG_INTERVAL_MINUTES = 10


class PlanCompiler:
    """Walks a configuration in fixed phase order and emits operations.

    Phases: resource groups, virtual networks (NSG, rules, then subnet for each
    subnet), network security perimeter, monitoring. Compilation never calls
    out to Azure.
    """

    def __init__(self, config: Configuration, context: Optional[OrganizationContext] = None, debug: bool = False):
        """Initialize the compiler.

        Args:
            config: Validated configuration.
            context: Organization context; built from ``config`` when omitted.
            debug: If True, print verbose debug information.
        """
        self.config = config
        self.context = context or OrganizationContext.from_configuration(config)
        self.naming = NamingEngine(self.context, config.naming)
        self.debug = debug

    def compile(self) -> Plan:
        """Compile the configuration into a plan.

        Returns:
            Plan: Ordered operations and compile warnings.

        Raises:
            RuleReferenceError: If a subnet references an undefined NSG rule.
        """
        self._warnings: List[str] = []
        self.resolver = ReferenceResolver(self.config, self.naming, debug=self.debug)

        # Refuse to emit anything if a security rule reference is dangling
        self._check_rule_references()

        operations: List[Operation] = []
        operations.extend(self._resource_groups())

        network_rg = self._resolve_role(NETWORK_ROLE, "network and perimeter deployment")
        if network_rg:
            operations.extend(self._network(network_rg))
            operations.extend(self._perimeter(network_rg))

        operations.extend(self._monitoring(network_rg))

        if self.debug:
            print(f"Debug: Compiled {len(operations)} operations")

        return Plan(operations, self._warnings + self.resolver.warnings)

    def _warn(self, message: str) -> None:
        self._warnings.append(message)

    def _resolve_role(self, role: str, phase: str) -> Optional[str]:
        try:
            return self.resolver.resolve_role_rg(role)
        except RoleNotFoundError as e:
            self._warn(f"{e}. Skipping {phase}.")
            return None

    def _check_rule_references(self) -> None:
        for vnet in self.config.vnets:
            for subnet in vnet.subnets:
                for rule in subnet.nsg_rules:
                    if is_empty_rule(rule):
                        continue
                    self.resolver.resolve_rule(rule, self.naming.subnet(subnet.name))

    def _resource_groups(self) -> List[Operation]:
        tags = tuple(self.context.tag_args)
        return [
            Operation(
                kind=OperationKind.CREATE_RESOURCE_GROUP,
                name=self.naming.resource_group(rg.name),
                resource_group=self.naming.resource_group(rg.name),
                params={"location": self.context.region, "tags": tags},
            )
            for rg in self.config.resource_groups
        ]

    def _network(self, rg: str) -> List[Operation]:
        if not self.config.vnets:
            self._warn("No VNets defined. Skipping network deployment.")
            return []

        tags = tuple(self.context.tag_args)
        operations = []
        for vnet in self.config.vnets:
            vnet_name = self.naming.vnet(vnet.name)
            operations.append(Operation(
                kind=OperationKind.CREATE_VNET,
                name=vnet_name,
                resource_group=rg,
                params={"address_prefix": vnet.cidr, "tags": tags},
            ))

            for subnet in vnet.subnets:
                subnet_name = self.naming.subnet(subnet.name)
                nsg_name = self.naming.nsg(subnet_name)
                operations.append(Operation(
                    kind=OperationKind.CREATE_NSG,
                    name=nsg_name,
                    resource_group=rg,
                    params={"tags": tags},
                ))

                for rule_name in subnet.nsg_rules:
                    if is_empty_rule(rule_name):
                        continue
                    rule = self.resolver.resolve_rule(rule_name, subnet_name)
                    operations.append(Operation(
                        kind=OperationKind.CREATE_NSG_RULE,
                        name=rule_name,
                        resource_group=rg,
                        params={
                            "nsg_name": nsg_name,
                            "priority": rule.priority,
                            "protocol": rule.protocol,
                            "direction": rule.direction,
                            "source": rule.source,
                            "source_ports": rule.source_ports,
                            "destination": rule.destination,
                            "destination_ports": rule.destination_ports,
                            "access": rule.access,
                        },
                    ))

                # Subnet goes last: it attaches the NSG created above
                operations.append(Operation(
                    kind=OperationKind.CREATE_SUBNET,
                    name=subnet_name,
                    resource_group=rg,
                    params={
                        "vnet_name": vnet_name,
                        "address_prefix": subnet.cidr,
                        "nsg_name": nsg_name,
                    },
                ))
        return operations

    def _perimeter(self, rg: str) -> List[Operation]:
        if not self.config.nsp:
            if self.config.custom_nsp_rules:
                self._warn("custom_nsp_rules declared without an nsp. Skipping NSP rules.")
            else:
                self._warn("No NSP defined. Skipping.")
            return []

        perimeter_name = self.naming.perimeter(self.config.nsp)
        operations = [
            Operation(
                kind=OperationKind.CREATE_PERIMETER,
                name=perimeter_name,
                resource_group=rg,
                params={"location": self.context.region, "tags": tuple(self.context.tag_args)},
            ),
            Operation(
                kind=OperationKind.CREATE_PERIMETER_PROFILE,
                name=PERIMETER_PROFILE,
                resource_group=rg,
                params={"perimeter_name": perimeter_name},
            ),
        ]
        for rule_name, rule in self.config.custom_nsp_rules.items():
            operations.append(Operation(
                kind=OperationKind.CREATE_PERIMETER_RULE,
                name=rule_name,
                resource_group=rg,
                params={
                    "perimeter_name": perimeter_name,
                    "profile_name": PERIMETER_PROFILE,
                    "address_prefixes": tuple(rule.source),
                },
            ))
        return operations

    def _monitoring(self, network_rg: Optional[str]) -> List[Operation]:
        config = self.config
        if not config.monitoring_enabled:
            self._warn("Monitoring disabled. Skipping monitoring deployment.")
            return []

        monitor_rg = self._resolve_role(MONITOR_ROLE, "monitoring deployment")
        if not monitor_rg:
            return []

        tags = tuple(self.context.tag_args)
        operations = []

        workspace_name = None
        if config.log_analytics_workspace:
            workspace_name = self.naming.workspace(config.log_analytics_workspace)
            operations.append(Operation(
                kind=OperationKind.CREATE_WORKSPACE,
                name=workspace_name,
                resource_group=monitor_rg,
                params={"location": self.context.region, "tags": tags},
            ))
        else:
            self._warn("No Log Analytics Workspace defined. Skipping LAW deploy.")

        if config.is_network_watcher_needed:
            operations.append(Operation(
                kind=OperationKind.CONFIGURE_NETWORK_WATCHER,
                name=f"NetworkWatcher_{self.context.region}",
                resource_group=monitor_rg,
                params={"location": self.context.region},
            ))

        if config.is_diagnostics_enabled:
            operations.extend(self._diagnostics(network_rg, monitor_rg, workspace_name))
        else:
            self._warn("Diagnostics disabled. Skipping flow logs and diagnostic settings.")

        if config.is_dashboard_needed:
            if config.dashboard_file:
                operations.append(Operation(
                    kind=OperationKind.CREATE_DASHBOARD,
                    name=f"{self.context.pattern}-main-dashboard",
                    resource_group=monitor_rg,
                    params={"location": self.context.region, "input_path": config.dashboard_file},
                ))
            else:
                self._warn("Dashboard requested but no dashboard_file configured. Deploy the dashboard manually.")

        return operations

    def _diagnostics(self, network_rg: Optional[str], monitor_rg: str, workspace_name: str) -> List[Operation]:
        storage_name = self.naming.storage_account(self.config.diagnostics_storage_account)
        operations = [Operation(
            kind=OperationKind.CREATE_STORAGE_ACCOUNT,
            name=storage_name,
            resource_group=monitor_rg,
            params={
                "location": self.context.region,
                "sku": "Standard_LRS",
                "storage_kind": "StorageV2",
                "tags": tuple(self.context.tag_args),
            },
        )]

        if not network_rg:
            self._warn("No network resource group. Skipping flow logs and NSP diagnostics.")
            return operations

        for vnet in self.config.vnets:
            vnet_name = self.naming.vnet(vnet.name)
            operations.append(Operation(
                kind=OperationKind.CREATE_FLOW_LOG,
                name=self.naming.flow_log(vnet_name),
                resource_group=network_rg,
                params={
                    "location": self.context.region,
                    "vnet_name": vnet_name,
                    "storage_account": storage_name,
                    "workspace": workspace_name,
                    "monitor_resource_group": monitor_rg,
                    "retention_days": FLOW_LOG_RETENTION_DAYS,
                    "interval_minutes": FLOW_LOG_INTERVAL_MINUTES,
                },
            ))

        if self.config.nsp:
            operations.append(Operation(
                kind=OperationKind.CREATE_DIAGNOSTIC_SETTINGS,
                name=DIAGNOSTIC_SETTINGS_NAME,
                resource_group=network_rg,
                params={
                    "resource_name": self.naming.perimeter(self.config.nsp),
                    "resource_type": "Microsoft.Network/networkSecurityPerimeters",
                    "workspace": workspace_name,
                    "monitor_resource_group": monitor_rg,
                },
            ))
        return operations

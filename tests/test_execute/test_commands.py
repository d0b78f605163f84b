"""Tests for Azure CLI command rendering."""
import pytest
from unittest.mock import MagicMock
from landingzone.execute.commands import SUBSCRIPTION_PLACEHOLDER, AzureCommandBuilder
from landingzone.plan.models import Operation, OperationKind

FLOW_LOG = Operation(
    kind=OperationKind.CREATE_FLOW_LOG,
    name="flow-vnet-weu-vks-s1-main-01",
    resource_group="rg-net",
    params={
        "location": "westeurope",
        "vnet_name": "vnet-weu-vks-s1-main-01",
        "storage_account": "stflowlogs01",
        "workspace": "law-main-01",
        "monitor_resource_group": "rg-mon",
        "retention_days": 30,
        "interval_minutes": 10,
    },
)


def test_resource_group_command():
    op = Operation(
        kind=OperationKind.CREATE_RESOURCE_GROUP,
        name="rg-weu-vks-s1-landingzone-01",
        resource_group="rg-weu-vks-s1-landingzone-01",
        params={"location": "westeurope", "tags": ("owner=platform", "deployed_at=2024-05-01T12:30:00Z")},
    )
    assert AzureCommandBuilder().build(op) == [
        "az", "group", "create",
        "--name", "rg-weu-vks-s1-landingzone-01",
        "--location", "westeurope",
        "--tags", "owner=platform", "deployed_at=2024-05-01T12:30:00Z",
    ]


def test_nsg_rule_command():
    op = Operation(
        kind=OperationKind.CREATE_NSG_RULE,
        name="allow-ssh",
        resource_group="rg-net",
        params={
            "nsg_name": "nsg-snet-compute-01",
            "priority": 100,
            "protocol": "Tcp",
            "direction": "Inbound",
            "source": "*",
            "source_ports": "*",
            "destination": "*",
            "destination_ports": "22",
            "access": "Allow",
        },
    )
    cmd = AzureCommandBuilder().build(op)

    assert cmd[:5] == ["az", "network", "nsg", "rule", "create"]
    assert cmd[cmd.index("--priority") + 1] == "100"
    assert cmd[cmd.index("--nsg-name") + 1] == "nsg-snet-compute-01"
    assert cmd[cmd.index("--destination-port-range") + 1] == "22"
    assert cmd[-2:] == ["--access", "Allow"]


def test_perimeter_rule_passes_every_prefix():
    op = Operation(
        kind=OperationKind.CREATE_PERIMETER_RULE,
        name="allow-corp",
        resource_group="rg-net",
        params={
            "perimeter_name": "nsp-main-01",
            "profile_name": "defaultProfile",
            "address_prefixes": ("203.0.113.0/24", "192.0.2.0/24"),
        },
    )
    cmd = AzureCommandBuilder().build(op)
    assert cmd[-3:] == ["--address-prefixes", "203.0.113.0/24", "192.0.2.0/24"]


def test_resource_ids_use_configured_subscription():
    cmd = AzureCommandBuilder("sub-123").build(FLOW_LOG)

    assert cmd[cmd.index("--storage-account") + 1] == (
        "/subscriptions/sub-123/resourceGroups/rg-mon/providers/Microsoft.Storage/storageAccounts/stflowlogs01"
    )
    assert cmd[cmd.index("--workspace") + 1] == (
        "/subscriptions/sub-123/resourceGroups/rg-mon/providers/Microsoft.OperationalInsights/workspaces/law-main-01"
    )


def test_resource_ids_placeholder_without_subscription():
    cmd = AzureCommandBuilder().build(FLOW_LOG)
    assert SUBSCRIPTION_PLACEHOLDER in cmd[cmd.index("--workspace") + 1]


def test_subscription_lookup_runs_once_and_lazily():
    lookup = MagicMock(return_value="sub-456")
    builder = AzureCommandBuilder(subscription_lookup=lookup)

    builder.build(Operation(OperationKind.CREATE_NSG, "nsg-a", "rg-net"))
    lookup.assert_not_called()

    builder.build(FLOW_LOG)
    builder.build(FLOW_LOG)
    lookup.assert_called_once()
    assert builder.subscription_id == "sub-456"


def test_every_kind_has_a_builder():
    assert set(AzureCommandBuilder().builders) == set(OperationKind)


def test_unknown_kind():
    builder = AzureCommandBuilder()
    builder.builders.pop(OperationKind.CREATE_DASHBOARD)

    with pytest.raises(ValueError):
        builder.build(Operation(OperationKind.CREATE_DASHBOARD, "dash", "rg-mon"))

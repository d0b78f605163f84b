"""Tests for plan and apply execution."""
import json
import pytest
from unittest.mock import MagicMock, patch
from landingzone.errors import ExecutionError
from landingzone.execute.client import AzureCliClient
from landingzone.execute.executor import ApplyStrategy, Executor, PlanStrategy, create_executor
from landingzone.execute.models import Action, OutcomeStatus
from landingzone.plan.compiler import PlanCompiler


@pytest.fixture
def plan(network_config, make_context):
    """Compiled plan with 1 VNet, 1 subnet, 2 rules and 1 perimeter."""
    return PlanCompiler(network_config, context=make_context(network_config)).compile()


@patch("subprocess.run")
def test_plan_mode_one_line_per_operation(mock_run, plan):
    report = Executor(PlanStrategy()).execute(plan)

    mock_run.assert_not_called()
    assert not report.aborted
    assert report.status == "success"
    assert len(report.lines) == len(plan)
    assert [o.operation for o in report.outcomes] == list(plan)
    assert all(o.status == OutcomeStatus.PLANNED for o in report.outcomes)
    assert report.lines[0].startswith("az group create --name rg-weu-vks-s1-landingzone-01")
    assert "az network vnet subnet create" in report.lines[5]


def test_apply_runs_in_order(plan):
    client = MagicMock()
    report = Executor(ApplyStrategy(client)).execute(plan)

    assert [c.args[0] for c in client.provision.call_args_list] == list(plan)
    assert report.count(OutcomeStatus.SUCCEEDED) == len(plan)
    assert report.status == "success"


def test_apply_aborts_at_first_failure(plan):
    """Operations 1-2 succeed, 3 fails, the rest are not attempted."""
    failing = plan[2]

    def provision(operation):
        if operation is failing:
            raise ExecutionError(operation, "AuthorizationFailed")

    client = MagicMock()
    client.provision.side_effect = provision
    seen = []

    report = Executor(ApplyStrategy(client), on_outcome=seen.append).execute(plan)

    assert client.provision.call_count == 3
    assert [o.status for o in report.outcomes[:3]] == [
        OutcomeStatus.SUCCEEDED,
        OutcomeStatus.SUCCEEDED,
        OutcomeStatus.FAILED,
    ]
    assert report.outcomes[2].detail == "AuthorizationFailed"
    assert all(o.status == OutcomeStatus.NOT_ATTEMPTED for o in report.outcomes[3:])
    assert [o.index for o in report.outcomes] == list(range(1, len(plan) + 1))
    assert report.aborted_at == 3
    assert report.status == "aborted-at-operation-3"
    assert report.error.index == 3
    assert report.error.operation is failing
    assert len(seen) == 3


def test_report_save(plan, tmp_path):
    client = MagicMock()
    client.provision.side_effect = ExecutionError(plan[0], "boom")
    report = Executor(ApplyStrategy(client)).execute(plan)

    output = tmp_path / "report.json"
    report.save(str(output))

    data = json.loads(output.read_text())
    assert data["action"] == "apply"
    assert data["status"] == "aborted-at-operation-1"
    assert data["operations"][0]["status"] == "failed"
    assert data["operations"][0]["detail"] == "boom"
    assert data["operations"][1]["status"] == "not-attempted"


def test_create_executor_selects_strategy(network_config):
    plan_executor = create_executor(Action.PLAN, network_config)
    apply_executor = create_executor(Action.APPLY, network_config)

    assert isinstance(plan_executor.strategy, PlanStrategy)
    assert isinstance(apply_executor.strategy, ApplyStrategy)
    assert isinstance(apply_executor.strategy.client, AzureCliClient)

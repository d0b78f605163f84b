"""Plan execution with interchangeable plan and apply strategies."""
import shlex
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional

from .client import AzureCliClient, ProvisioningClient
from .commands import AzureCommandBuilder
from .models import Action, ExecutionReport, OperationOutcome, OutcomeStatus
from ..config.schema import Configuration
from ..errors import ExecutionError
from ..plan.models import Operation


class ExecutionStrategy(ABC):
    """How a single operation is carried out."""
    action: Action

    @abstractmethod
    def run(self, index: int, operation: Operation) -> OperationOutcome:
        """Carry out one operation.

        Raises:
            ExecutionError: If the operation fails.
        """
        pass


class PlanStrategy(ExecutionStrategy):
    """Renders each operation as the command that would run. Never calls out."""
    action = Action.PLAN

    def __init__(self, commands: Optional[AzureCommandBuilder] = None):
        self.commands = commands or AzureCommandBuilder()

    def run(self, index: int, operation: Operation) -> OperationOutcome:
        line = shlex.join(self.commands.build(operation))
        return OperationOutcome(index, operation, OutcomeStatus.PLANNED, line)


class ApplyStrategy(ExecutionStrategy):
    """Provisions each operation through a client."""
    action = Action.APPLY

    def __init__(self, client: ProvisioningClient):
        self.client = client

    def run(self, index: int, operation: Operation) -> OperationOutcome:
        self.client.provision(operation)
        return OperationOutcome(index, operation, OutcomeStatus.SUCCEEDED)


class Executor:
    """Runs operations in order, stopping at the first failure."""

    def __init__(self, strategy: ExecutionStrategy,
                 on_outcome: Optional[Callable[[OperationOutcome], None]] = None):
        """Initialize the executor.

        Args:
            strategy: Plan or apply strategy, chosen once per run.
            on_outcome: Called after each operation, e.g. to print progress.
        """
        self.strategy = strategy
        self.on_outcome = on_outcome

    def execute(self, operations: Iterable[Operation]) -> ExecutionReport:
        """Execute operations in order.

        Completed operations are not rolled back when a later one fails; the
        failing operation and everything after it are recorded in the report.

        Returns:
            ExecutionReport: Outcome of every operation.
        """
        operations = list(operations)
        report = ExecutionReport(self.strategy.action)

        for index, operation in enumerate(operations, start=1):
            try:
                outcome = self.strategy.run(index, operation)
            except ExecutionError as e:
                e.index = index
                outcome = OperationOutcome(index, operation, OutcomeStatus.FAILED, e.reason)
                report.outcomes.append(outcome)
                report.aborted_at = index
                report.error = e
                self._notify(outcome)
                break
            report.outcomes.append(outcome)
            self._notify(outcome)

        if report.aborted:
            for index, operation in enumerate(operations[report.aborted_at:], start=report.aborted_at + 1):
                report.outcomes.append(OperationOutcome(index, operation, OutcomeStatus.NOT_ATTEMPTED))

        return report

    def _notify(self, outcome: OperationOutcome) -> None:
        if self.on_outcome:
            self.on_outcome(outcome)


def create_executor(
    action: Action,
    config: Configuration,
    debug: bool = False,
    on_outcome: Optional[Callable[[OperationOutcome], None]] = None,
) -> Executor:
    """Select the execution strategy for a run.

    Args:
        action: ``plan`` renders commands only; ``apply`` runs them.
        config: Configuration supplying the subscription, if any.
        debug: If True, print verbose debug information.
        on_outcome: Progress callback.
    """
    if action == Action.APPLY:
        strategy = ApplyStrategy(AzureCliClient(config.subscription, debug=debug))
    else:
        strategy = PlanStrategy(AzureCommandBuilder(config.subscription))
    return Executor(strategy, on_outcome=on_outcome)

"""Data models for execution results."""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..plan.models import Operation


class Action(str, Enum):
    """What to do with a compiled plan."""
    PLAN = "plan"
    APPLY = "apply"


class OutcomeStatus(str, Enum):
    """Result of a single operation."""
    PLANNED = "planned"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_ATTEMPTED = "not-attempted"


@dataclass
class OperationOutcome:
    """Outcome of one operation in a run."""
    index: int
    operation: Operation
    status: OutcomeStatus
    detail: Optional[str] = None


@dataclass
class ExecutionReport:
    """Ordered outcomes of a plan or apply run."""
    action: Action
    outcomes: List[OperationOutcome] = field(default_factory=list)
    aborted_at: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def aborted(self) -> bool:
        return self.aborted_at is not None

    @property
    def status(self) -> str:
        """Overall run status."""
        if self.aborted:
            return f"aborted-at-operation-{self.aborted_at}"
        return "success"

    @property
    def lines(self) -> List[str]:
        """Rendered command lines of a plan run."""
        return [o.detail for o in self.outcomes if o.status == OutcomeStatus.PLANNED]

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def save(self, output_path: str) -> None:
        """Save the report to a JSON file.

        Args:
            output_path: Path to write the JSON file.
        """
        result = {
            "action": self.action.value,
            "status": self.status,
            "aborted_at": self.aborted_at,
            "operations": [
                {
                    "index": o.index,
                    "kind": o.operation.kind.value,
                    "name": o.operation.name,
                    "resource_group": o.operation.resource_group,
                    "status": o.status.value,
                    "detail": o.detail,
                } for o in self.outcomes
            ]
        }

        with open(output_path, 'w') as f:
            json.dump(result, f, indent=2)

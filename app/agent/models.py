"""Value types shared by the planner, step executor and tool loop."""

from dataclasses import dataclass, field
from typing import Any

STATUS_COMPLETED = "Completed"


@dataclass(frozen=True)
class Step:
    name: str
    description: str


@dataclass(frozen=True)
class StepRecord:
    """One completed step as stored in the execution context."""

    name: str
    description: str
    result: str

    def render(self) -> str:
        return f"\nStep: {self.name} - {self.description}\nResult: {self.result}"


@dataclass
class ExecutionContext:
    """
    Append-only log of completed steps for a single task run.

    render() gives the deterministic text fed to later steps and the summarizer.
    """

    records: list[StepRecord] = field(default_factory=list)

    def append(self, record: StepRecord) -> None:
        self.records.append(record)

    def render(self) -> str:
        return "".join(r.render() for r in self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class StepResult:
    action: str
    result: str
    status: str = STATUS_COMPLETED

    @classmethod
    def completed(cls, step: Step, result: str) -> "StepResult":
        return cls(action=f"{step.name}: {step.description}", result=result)


@dataclass(frozen=True)
class ToolCall:
    name: str
    arguments: dict[str, Any]
    result: str


@dataclass(frozen=True)
class TaskRun:
    run_id: str
    steps: list[StepResult]
    result: str


@dataclass(frozen=True)
class ToolLoopResult:
    response: str
    tool_calls: list[ToolCall]
    turns: int

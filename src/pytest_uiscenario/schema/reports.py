"""Run report definitions.

A run report is created fresh for each execution of one test case and
returned to the caller, which is responsible for rendering or storing it.
"""

from datetime import datetime  # noqa: TC003
from enum import StrEnum
from os import linesep

from pydantic import Field, computed_field

from pytest_uiscenario.models import SchemaModel


class Status(StrEnum):
    """Outcome of a step, an iteration, or a run."""

    PASSED = 'passed'
    FAILED = 'failed'


class RunState(StrEnum):
    """Lifecycle state of a run."""

    PENDING = 'pending'
    RUNNING = 'running'
    COMPLETED = 'completed'
    ABORTED = 'aborted'


class IterationResult(SchemaModel):
    """Outcome of one element of an iterating step."""

    index: int = Field(title='Element index')
    status: Status = Field(title='Status')
    failures: list[str] = Field(
        default_factory=list,
        title='Soft failures',
        description='Messages of soft validation failures recorded for the element.',
    )


class StepResult(SchemaModel):
    """Outcome of one executed step."""

    title: str = Field(title='Step title')
    status: Status = Field(title='Status')
    start_time: datetime = Field(title='Start time')
    end_time: datetime = Field(title='End time')

    error: str | None = Field(
        default=None,
        title='Error',
        description='Message of the failure that aborted the run at this step.',
    )

    failures: list[str] = Field(
        default_factory=list,
        title='Soft failures',
        description='Messages of soft validation failures recorded for the step.',
    )

    iterations: list[IterationResult] = Field(
        default_factory=list,
        title='Iterations',
        description='Per-element sub-entries of an iterating step.',
    )

    @property
    def passed(self) -> bool:
        """Return whether the step passed."""
        return self.status is Status.PASSED


class RunReport(SchemaModel):
    """Structured pass/fail result of executing one test case."""

    title: str = Field(title='Test case description')
    state: RunState = Field(title='Final run state')
    start_time: datetime = Field(title='Start time')
    end_time: datetime = Field(title='End time')
    steps: list[StepResult] = Field(
        default_factory=list,
        title='Step results',
        description='Results of executed steps, in execution order.',
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> Status:
        """Return `passed` iff every recorded step passed."""
        if all(step.passed for step in self.steps):
            return Status.PASSED

        return Status.FAILED

    @property
    def passed(self) -> bool:
        """Return whether the run passed."""
        return self.status is Status.PASSED

    def format(self) -> str:
        """Render the report as human-readable text.

        Returns:
            One line per step followed by its error and soft failures.
        """
        lines = [f'{self.title or "<untitled>"}: {self.status} ({self.state})']

        for position, step in enumerate(self.steps, start=1):
            lines.append(f'  {position}. [{step.status}] {step.title}')
            for iteration in step.iterations:
                if iteration.status is Status.FAILED:
                    lines.append(f'       element {iteration.index}: {iteration.status}')
            lines.extend(
                f'       soft: {failure}'
                for failure in step.failures
            )
            if step.error:
                lines.extend(
                    f'       {line}'
                    for line in step.error.splitlines()
                )

        return linesep.join(lines)

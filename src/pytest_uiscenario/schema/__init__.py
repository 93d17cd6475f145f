"""Declarative schema for UI test scenarios.

Defines immutable Pydantic models that describe test cases, steps,
validations, uploaded files, and the run report produced by the engine.
The module specifies the structural contract of scenario documents and is
consumed by the execution engine, the loader, and tooling.
"""

from .cases import TestCase
from .reports import IterationResult, RunReport, RunState, Status, StepResult
from .steps import TestStep, UploadFile
from .validations import ValidationStep

__all__ = (
    'IterationResult',
    'RunReport',
    'RunState',
    'Status',
    'StepResult',
    'TestCase',
    'TestStep',
    'UploadFile',
    'ValidationStep',
)

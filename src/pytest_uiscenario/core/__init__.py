"""Scenario execution runtime.

This module wires the execution components together:
- target resolution from a selector and a selector strategy;
- action dispatch through a lookup table of Playwright operations;
- validation evaluation through Playwright web-first assertions;
- custom handler registration and plugin discovery.

The primary public entry point is `ScenarioEngine`, which runs a test
case against an injected page and returns a run report.
"""

from .dispatcher import ActionDispatcher
from .engine import ScenarioEngine
from .evaluator import ValidationEvaluator
from .registry import CustomLogicRegistry
from .resolver import TargetResolver

__all__ = (
    'ActionDispatcher',
    'CustomLogicRegistry',
    'ScenarioEngine',
    'TargetResolver',
    'ValidationEvaluator',
)

"""Pytest integration for scenario files.

This module defines a custom pytest file collector that treats JSON and
YAML files as executable scenario documents.

Each collected file is loaded and validated, and every enabled test case
it holds is converted into a `ScenarioItem`, ordered by `testOrder`.
"""

from typing import TYPE_CHECKING

import pytest

from pytest_uiscenario.loader import load_file, sort_cases, substitute_token

from .case import ScenarioItem

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from pytest_uiscenario.schema import TestCase


class ScenarioFile(pytest.File):
    """Pytest file collector for scenario documents.

    This collector:
    - loads a scenario file holding one or several test cases;
    - drops disabled cases and substitutes the `${TOKEN}` placeholder;
    - emits one `ScenarioItem` per remaining case.
    """

    __test__ = False

    def collect(self) -> 'Iterable[ScenarioItem]':
        """Collect pytest items from a scenario file.

        Returns:
            Iterable of `ScenarioItem` instances for pytest execution.

        Raises:
            ScenarioSchemaError: If the document is malformed.
        """
        cases = self.prepare_cases(load_file(self.path))

        for index, case in enumerate(cases):
            yield ScenarioItem.from_parent(
                self,
                name=self.make_name(index, len(cases)),
                case=case,
                settings=self.config.uiscenario_settings,  # type: ignore[attr-defined]
                registry=self.config.uiscenario_registry,  # type: ignore[attr-defined]
            )

    def prepare_cases(self, cases: list['TestCase']) -> list['TestCase']:
        """Filter, substitute, and sort loaded cases.

        Args:
            cases: Cases in document order.

        Returns:
            Runnable cases.
        """
        token = self.config.uiscenario_settings.token  # type: ignore[attr-defined]

        enabled = [case for case in cases if case.enabled]
        if token is not None:
            enabled = [substitute_token(case, token.get_secret_value()) for case in enabled]

        return sort_cases(enabled)

    def make_name(self, index: int, total: int) -> str:
        """Return the item name of a case."""
        if total == 1:
            return self.path.stem

        return f'{self.path.stem}[{index}]'

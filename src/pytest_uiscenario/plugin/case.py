"""Pytest item running one test case in a real browser."""

from asyncio import run
from typing import TYPE_CHECKING

import pytest

from pytest_uiscenario.browser import open_session
from pytest_uiscenario.core import ScenarioEngine

if TYPE_CHECKING:
    from typing import Any

if TYPE_CHECKING:
    from pytest_uiscenario.core import CustomLogicRegistry
    from pytest_uiscenario.schema import RunReport, TestCase
    from pytest_uiscenario.settings import EngineSettings


class ScenarioItem(pytest.Item):
    """Pytest item executing a single test case.

    Every item opens its own browser session, so items stay independent
    of each other and of the collection order.
    """

    __test__ = False

    def __init__(self, *,
                 case: 'TestCase',
                 settings: 'EngineSettings',
                 registry: 'CustomLogicRegistry',
                 **kwargs: 'Any') -> None:
        """Initialize a pytest item backed by a test case.

        Args:
            case: Test case to run.
            settings: Engine and browser settings.
            registry: Custom handler registry.
            **kwargs: Keyword pytest.Item arguments.
        """
        super().__init__(**kwargs)

        self.case = case
        self.settings = settings
        self.registry = registry

    async def run_case(self) -> 'RunReport':
        """Open a browser session and run the test case."""
        engine = ScenarioEngine(self.registry, self.settings)

        async with open_session(self.settings) as session:
            page = await session.new_page()
            return await engine.run(self.case, page)

    def runtest(self) -> None:
        """Execute the test case.

        Raises:
            AssertionError: With the formatted report if the run failed.
        """
        report = run(self.run_case())
        if not report.passed:
            raise AssertionError(f'in "{self.path}"\n{report.format()}')

    def repr_failure(self, excinfo: pytest.ExceptionInfo[BaseException],
                     style: 'Any' = None) -> str:
        """Return the run report instead of a traceback for failed runs."""
        if isinstance(excinfo.value, AssertionError):
            return f'{excinfo.value}'

        return super().repr_failure(excinfo, style)  # type: ignore[return-value]

    def reportinfo(self) -> tuple[str, int | None, str]:
        """Return the location shown in pytest reports."""
        return f'{self.path}', None, self.case.description or self.name

"""Step orchestration for test-case runs.

The engine sequences every step of a test case: resolve the target,
dispatch the action (once per matched element when the step iterates),
wait, then evaluate the validations. It records one result per executed
step and stops at the first hard failure.
"""

from datetime import UTC, datetime
from inspect import isawaitable
from typing import TYPE_CHECKING, Any

from pytest_uiscenario.context import RunContext
from pytest_uiscenario.errors import (
    EmptyTestCase,
    ScenarioError,
    StepError,
    UnsupportedSelectorType,
    ValidationFailure,
)
from pytest_uiscenario.schema import IterationResult, RunReport, RunState, Status, StepResult
from pytest_uiscenario.settings import EngineSettings

from .dispatcher import ActionDispatcher
from .evaluator import ValidationEvaluator
from .registry import CustomLogicRegistry
from .resolver import TargetResolver

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

if TYPE_CHECKING:
    from pytest_uiscenario.schema import TestCase, TestStep


def _now() -> datetime:
    return datetime.now(UTC)


class ScenarioEngine:
    """Execute test cases against a page and report the outcome.

    One engine may run any number of test cases, sequentially or
    concurrently on independent pages; every run gets its own context.

    Attributes:
        registry: Custom handler registry.
        settings: Engine settings.
        resolver: Target resolver.
        dispatcher: Action dispatcher.
        evaluator: Validation evaluator.
    """

    def __init__(self, registry: CustomLogicRegistry | None = None,
                 settings: EngineSettings | None = None, *,
                 expect: Any = None,  # noqa: ANN401
                 cwd: 'Path | None' = None) -> None:
        """Initialize the engine.

        Args:
            registry: Custom handler registry; a registry with builtin
                handlers and entry point plugins is created when omitted.
            settings: Engine settings, read from the environment when omitted.
            expect: Assertion factory, Playwright `expect` by default.
            cwd: Working directory for relative upload paths.
        """
        self.settings = settings or EngineSettings()
        self.registry = registry or CustomLogicRegistry(strict=self.settings.strict)

        self.resolver = TargetResolver()
        self.dispatcher = ActionDispatcher(
            self.registry,
            strict_targets=self.settings.strict_targets,
            cwd=cwd,
        )
        self.evaluator = ValidationEvaluator(
            self.registry,
            self.resolver,
            expect=expect,
            strict_validations=self.settings.strict_validations,
        )

    async def run(self, case: 'TestCase', page: 'Page',
                  context: RunContext | None = None) -> RunReport:
        """Run a test case.

        Step failures never propagate: the failing step is recorded with
        its error as the last entry of the report.

        Args:
            case: Test case to run.
            page: Page to drive.
            context: Run context; a fresh one is created when omitted.

        Returns:
            The run report.

        Raises:
            EmptyTestCase: If the case has no steps.
        """
        if not case.test_steps:
            raise EmptyTestCase('Test case has no steps')

        if context is None:
            context = RunContext()

        start_time = _now()
        state = RunState.RUNNING

        results: list[StepResult] = []
        for step_num, step in enumerate(case.test_steps):
            result = await self.run_step(page, step, context, step_num=step_num)
            results.append(result)
            if result.error is not None:
                state = RunState.ABORTED
                break
        else:
            state = RunState.COMPLETED

        return RunReport(
            title=case.description,
            state=state,
            start_time=start_time,
            end_time=_now(),
            steps=results,
        )

    async def run_step(self, page: 'Page', step: 'TestStep',
                       context: RunContext, *,
                       step_num: int | None = None) -> StepResult:
        """Run one step and record its outcome.

        Args:
            page: Page to drive.
            step: Step to run.
            context: Run context.
            step_num: Step index for error reporting.

        Returns:
            The step result; `error` is set when the step failed hard.
        """
        start_time = _now()
        iterations: list[IterationResult] = []
        failures: list[str] = []
        error: str | None = None

        try:
            await self.execute_step(
                page,
                step,
                context,
                failures=failures,
                iterations=iterations,
                step_num=step_num,
            )

        except StepError as base:
            error = str(base)

        status = Status.FAILED if error or failures else Status.PASSED

        return StepResult(
            title=self.describe_step(step),
            status=status,
            start_time=start_time,
            end_time=_now(),
            error=error,
            failures=failures,
            iterations=iterations,
        )

    async def execute_step(self, page: 'Page', step: 'TestStep',  # noqa: PLR0913
                           context: RunContext, *,
                           failures: list[str],
                           iterations: list[IterationResult],
                           step_num: int | None = None) -> None:
        """Execute one step.

        Args:
            page: Page to drive.
            step: Step to execute.
            context: Run context.
            failures: Collector for soft validation failures.
            iterations: Collector for per-element results.
            step_num: Step index for error reporting.

        Raises:
            StepError: On any hard failure.
        """
        target = await self.run_callable(
            self.resolve_target,
            page,
            step,
            model=step,
            context=context,
            step_num=step_num,
        )

        if step.iterate and target is not None:
            count = await self.run_callable(
                target.count,
                model=step,
                context=context,
                step_num=step_num,
            )
            for index in range(count):
                element_failures: list[str] = []
                completed = False
                try:
                    await self.execute_once(
                        page,
                        step,
                        target.nth(index),
                        context,
                        failures=element_failures,
                        step_num=step_num,
                        iteration=index,
                    )
                    completed = True
                finally:
                    failures.extend(
                        f'element {index}: {failure}'
                        for failure in element_failures
                    )
                    iterations.append(IterationResult(
                        index=index,
                        status=(
                            Status.PASSED
                            if completed and not element_failures
                            else Status.FAILED
                        ),
                        failures=element_failures,
                    ))
            return None

        await self.execute_once(
            page,
            step,
            target,
            context,
            failures=failures,
            step_num=step_num,
        )

    async def execute_once(self, page: 'Page', step: 'TestStep',  # noqa: PLR0913
                           target: 'Locator | None',
                           context: RunContext, *,
                           failures: list[str],
                           step_num: int | None = None,
                           iteration: int | None = None) -> None:
        """Perform the action, the wait, and the validations once.

        Args:
            page: Page to drive.
            step: Step to execute.
            target: Element (or elements) the action applies to.
            context: Run context.
            failures: Collector for soft validation failures.
            step_num: Step index for error reporting.
            iteration: Element index when the step iterates.

        Raises:
            StepError: On any hard failure.
        """
        await self.run_callable(
            self.dispatcher.execute,
            page,
            step,
            target,
            context,
            model=step,
            context=context,
            step_num=step_num,
            iteration=iteration,
        )

        if step.wait_time and step.action != 'waitForTimeout':
            await self.run_callable(
                page.wait_for_timeout,
                step.wait_time,
                model=step,
                context=context,
                step_num=step_num,
                iteration=iteration,
            )

        await self.run_validations(
            page,
            step,
            target,
            context,
            failures=failures,
            step_num=step_num,
            iteration=iteration,
        )

    async def run_validations(self, page: 'Page', step: 'TestStep',  # noqa: PLR0913
                              scope: 'Locator | None',
                              context: RunContext, *,
                              failures: list[str],
                              step_num: int | None = None,
                              iteration: int | None = None) -> None:
        """Evaluate the validations of a step in order.

        Soft failures are appended to `failures`; any other failure stops
        the evaluation.

        Args:
            page: Page to drive.
            step: Step owning the validations.
            scope: Default validation target.
            context: Run context.
            failures: Collector for soft validation failures.
            step_num: Step index for error reporting.
            iteration: Element index when the step iterates.

        Raises:
            StepError: On a hard validation failure.
        """
        for validation_num, validation in enumerate(step.validations):
            try:
                await self.evaluator.evaluate(page, validation, scope, context)

            except ValidationFailure as base:
                if not validation.soft:
                    raise StepError.from_pydantic_model(
                        validation,
                        message=base.message,
                        context=context,
                        step_num=step_num,
                        iteration=iteration,
                        validation_num=validation_num,
                    ) from base
                failures.append(base.message)

            except ScenarioError as base:
                raise StepError.from_pydantic_model(
                    validation,
                    message=base.message,
                    context=context,
                    step_num=step_num,
                    iteration=iteration,
                    validation_num=validation_num,
                ) from base

            except Exception as base:
                raise StepError.from_pydantic_model(
                    validation,
                    message=f'{base!r}',
                    context=context,
                    step_num=step_num,
                    iteration=iteration,
                    validation_num=validation_num,
                ) from base

    def describe_step(self, step: 'TestStep') -> str:
        """Return the report title of a step.

        Unnamed steps with a selector are titled with the resolved
        selector string; an unknown strategy keeps the plain title, the
        failure itself is reported by the step.
        """
        if step.step_name or not step.selector:
            return step.title

        try:
            target = self.resolver.describe(step.selector, step.selector_type)
        except UnsupportedSelectorType:
            return step.title

        return f'{step.action} {target}'

    def resolve_target(self, page: 'Page', step: 'TestStep') -> 'Locator | None':
        """Resolve the target of a step, `None` when it has no selector."""
        if not step.selector:
            return None

        return self.resolver.resolve(page, step.selector, step.selector_type, step.nth)

    async def run_callable[T](self, executor: Any, *args: Any,  # noqa: ANN401
                              model: 'TestStep',
                              context: RunContext,
                              step_num: int | None = None,
                              iteration: int | None = None) -> T:
        """Call (and await) an executor with unified error handling.

        Args:
            executor: Callable performing the actual work.
            *args: Positional arguments for the executor.
            model: Step associated with the execution unit.
            context: Run context at execution time.
            step_num: Step index for error reporting.
            iteration: Element index when the step iterates.

        Returns:
            Result of the executor.

        Raises:
            StepError: Wrapped exception with step context.
        """
        try:
            result = executor(*args)
            if isawaitable(result):
                result = await result
            return result  # type: ignore[no-any-return]

        except ScenarioError as base:
            raise StepError.from_pydantic_model(
                model,
                message=base.message,
                context=context,
                step_num=step_num,
                iteration=iteration,
            ) from base

        except Exception as base:
            raise StepError.from_pydantic_model(
                model,
                message=f'{base!r}',
                context=context,
                step_num=step_num,
                iteration=iteration,
            ) from base

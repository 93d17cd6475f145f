"""Action dispatching for test steps.

Each action of the instruction set is implemented by one coroutine held
in a lookup table keyed by the action name. Element actions run against
the resolved target; page actions run against the page itself.
"""

from collections.abc import Awaitable, Callable, Mapping
from inspect import isawaitable
from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_snake

from pytest_uiscenario.errors import TargetMissing, UnsupportedAction, UploadTargetMissing
from pytest_uiscenario.values import stringify

from .uploads import collect_uploads, normalize_uploads

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

if TYPE_CHECKING:
    from pytest_uiscenario.context import RunContext
    from pytest_uiscenario.names import ActionName
    from pytest_uiscenario.schema import TestStep

    from .registry import CustomLogicRegistry

type ActionCallable = Callable[['Page', 'TestStep', 'Locator | None', 'RunContext'], Awaitable[None]]


def make_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Convert document options into Playwright keyword arguments.

    Documents spell options in camelCase (`clickCount`), the Python API
    in snake_case (`click_count`).

    Args:
        options: Opaque options mapping from a document.

    Returns:
        Keyword arguments for a Playwright call.
    """
    return {
        to_snake(key): value
        for key, value in options.items()
    }


class ActionDispatcher:
    """Execute step actions against a page or a resolved target.

    Element actions (`fill`, `type`, `click`, `hover`, `press`) are
    silently skipped when the step has no target. With `strict_targets`
    they raise `TargetMissing` instead.
    """

    def __init__(self, registry: 'CustomLogicRegistry', *,
                 strict_targets: bool = False,
                 cwd: 'Path | None' = None) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Registry providing custom action handlers.
            strict_targets: Whether element actions without a target fail.
            cwd: Working directory for relative upload paths.
        """
        self.registry = registry
        self.strict_targets = strict_targets
        self.cwd = cwd

        self.handlers: dict[ActionName, ActionCallable] = {
            'goto': self.goto,
            'fill': self.fill,
            'type': self.type,
            'click': self.click,
            'hover': self.hover,
            'press': self.press,
            'upload': self.upload,
            'waitForTimeout': self.wait_for_timeout,
            'custom': self.custom,
        }

    async def execute(self, page: 'Page', step: 'TestStep',
                      target: 'Locator | None', context: 'RunContext') -> None:
        """Execute the action of a step.

        Args:
            page: Current page.
            step: Step to execute.
            target: Resolved target, or `None` when the step has no selector.
            context: Run context shared with custom handlers.

        Raises:
            UnsupportedAction: If the action is not part of the instruction set.
            ActionError: If the action cannot be performed.
        """
        handler = self.handlers.get(step.action)  # type: ignore[call-overload]
        if handler is None:
            raise UnsupportedAction(step.action)

        await handler(page, step, target, context)

    def has_target(self, step: 'TestStep', target: 'Locator | None') -> bool:
        """Check whether an element action can run.

        Args:
            step: Step to execute.
            target: Resolved target.

        Returns:
            True if the target exists, False if the action must be skipped.

        Raises:
            TargetMissing: If the target is missing in strict-target mode.
        """
        if target is not None:
            return True

        if self.strict_targets:
            raise TargetMissing(step.action)

        return False

    async def goto(self, page: 'Page', step: 'TestStep',
                   target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Navigate to the step path (`/` by default)."""
        await page.goto(step.path or '/', **make_options(step.action_options))

    async def fill(self, page: 'Page', step: 'TestStep',
                   target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Set the value of an input."""
        if self.has_target(step, target):
            await target.fill(stringify(step.data), **make_options(step.action_options))

    async def type(self, page: 'Page', step: 'TestStep',
                   target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Type text key by key."""
        if self.has_target(step, target):
            await target.press_sequentially(stringify(step.data), **make_options(step.action_options))

    async def click(self, page: 'Page', step: 'TestStep',
                    target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Click an element."""
        if self.has_target(step, target):
            await target.click(**make_options(step.action_options))

    async def hover(self, page: 'Page', step: 'TestStep',
                    target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Hover over an element."""
        if self.has_target(step, target):
            await target.hover(**make_options(step.action_options))

    async def press(self, page: 'Page', step: 'TestStep',
                    target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Press a key or a key combination on an element."""
        if self.has_target(step, target):
            await target.press(stringify(step.data), **make_options(step.action_options))

    async def upload(self, page: 'Page', step: 'TestStep',
                     target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assign files to a file input.

        Raises:
            UploadTargetMissing: If the step has no target.
            NoUploadSource: If the step lists no files.
        """
        if target is None:
            raise UploadTargetMissing

        files = normalize_uploads(collect_uploads(step, self.cwd))

        if step.clear_first:
            await target.set_input_files([])

        await target.set_input_files(files, **make_options(step.action_options))

    async def wait_for_timeout(self, page: 'Page', step: 'TestStep',
                               target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Suspend the run for `waitTime` milliseconds."""
        if step.wait_time:
            await page.wait_for_timeout(step.wait_time)

    async def custom(self, page: 'Page', step: 'TestStep',
                     target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Invoke a registered custom action.

        Raises:
            CustomActionNotFound: If `customName` is missing or unknown.
        """
        handler = self.registry.get_action(step.custom_name)

        result = handler(page, step, context)
        if isawaitable(result):
            await result

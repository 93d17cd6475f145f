"""Validation evaluation for test steps.

Each validation type is implemented by one coroutine held in a lookup
table keyed by the type name. Built-in types are Playwright web-first
assertions (`expect`), so they retry until the condition holds or the
assertion timeout expires.
"""

from collections.abc import Awaitable, Callable
from inspect import isawaitable
from re import compile as regexp
from typing import TYPE_CHECKING, Any
from warnings import warn

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import expect as playwright_expect

from pytest_uiscenario.context import ValidationScope
from pytest_uiscenario.errors import (
    MissingAttributeKey,
    MissingCssPropertyKey,
    MissingSelector,
    UnsupportedValidationType,
    UnsupportedValidationWarning,
    ValidationFailure,
)
from pytest_uiscenario.values import stringify

from .dispatcher import make_options

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

if TYPE_CHECKING:
    from pytest_uiscenario.context import RunContext
    from pytest_uiscenario.names import ValidationType
    from pytest_uiscenario.schema import ValidationStep

    from .registry import CustomLogicRegistry
    from .resolver import TargetResolver

type ValidationCallable = Callable[['Page', 'ValidationStep', 'Locator | None', 'RunContext'], Awaitable[None]]


class ValidationEvaluator:
    """Evaluate validations against the page or a target.

    The target of a validation is its own selector when present, freshly
    resolved and narrowed by its own `nth`; otherwise the scope target
    handed over by the engine (the element the step acted upon).

    Failed assertions raise `ValidationFailure`. Unknown validation types
    emit `UnsupportedValidationWarning` and pass, unless
    `strict_validations` is set.
    """

    def __init__(self, registry: 'CustomLogicRegistry',
                 resolver: 'TargetResolver', *,
                 expect: Any = None,  # noqa: ANN401
                 strict_validations: bool = False) -> None:
        """Initialize the evaluator.

        Args:
            registry: Registry providing custom validation handlers.
            resolver: Resolver used for validation selectors.
            expect: Assertion factory, Playwright `expect` by default.
            strict_validations: Whether unknown types fail.
        """
        self.registry = registry
        self.resolver = resolver
        self.expect = expect or playwright_expect
        self.strict_validations = strict_validations

        self.handlers: dict[ValidationType, ValidationCallable] = {
            'toBeVisible': self.to_be_visible,
            'toBeHidden': self.to_be_hidden,
            'toHaveTitle': self.to_have_title,
            'toHaveURL': self.to_have_url,
            'toHaveText': self.to_have_text,
            'toHaveValue': self.to_have_value,
            'toHaveAttribute': self.to_have_attribute,
            'toHaveCSS': self.to_have_css,
            'toHaveClass': self.to_have_class,
            'custom': self.custom,
        }

    def resolve_target(self, page: 'Page', validation: 'ValidationStep',
                       scope: 'Locator | None') -> 'Locator | None':
        """Return the target a validation applies to.

        Args:
            page: Current page.
            validation: Validation to evaluate.
            scope: Target inherited from the step.

        Returns:
            Locator for the validation selector, the scope target, or `None`.

        Raises:
            UnsupportedSelectorType: If the validation strategy is unknown.
        """
        if validation.selector:
            return self.resolver.resolve(
                page,
                validation.selector,
                validation.selector_type,
                validation.nth,
            )

        return scope

    async def evaluate(self, page: 'Page', validation: 'ValidationStep',
                       scope: 'Locator | None', context: 'RunContext') -> None:
        """Evaluate a validation.

        Args:
            page: Current page.
            validation: Validation to evaluate.
            scope: Target inherited from the step, if any.
            context: Run context.

        Raises:
            ValidationFailure: If the assertion does not hold.
            ValidationError: If the validation is incomplete (missing
                selector, attribute, CSS property, or custom handler).
            UnsupportedValidationType: If the type is unknown on strict mode.
        """
        handler = self.handlers.get(validation.type)  # type: ignore[call-overload]
        if handler is None:
            if self.strict_validations:
                raise UnsupportedValidationType(validation.type)
            warn(
                f'Unsupported validation type: {validation.type!r}',
                category=UnsupportedValidationWarning,
                stacklevel=2,
            )
            return None

        target = self.resolve_target(page, validation, scope)

        try:
            await handler(page, validation, target, context)

        except AssertionError as base:
            raise ValidationFailure(
                validation.type,
                self.failure_message(validation, base),
            ) from base

        except PlaywrightError as base:
            raise ValidationFailure(
                validation.type,
                self.failure_message(validation, base),
            ) from base

    @staticmethod
    def failure_message(validation: 'ValidationStep', error: Exception) -> str:
        """Build the message of a failed assertion.

        Args:
            validation: Failed validation.
            error: Error raised by the assertion.

        Returns:
            The assertion error text, or the validation message.
        """
        if message := str(error).strip():
            return message

        return validation.message or 'assertion failed'

    def assertion(self, actual: Any, validation: 'ValidationStep') -> Any:  # noqa: ANN401
        """Create an assertion object for a page or a locator."""
        return self.expect(actual, validation.message)

    @staticmethod
    def require_target(validation: 'ValidationStep', target: 'Locator | None') -> 'Locator':
        """Return the target or fail with `MissingSelector`."""
        if target is None:
            raise MissingSelector(validation.type)

        return target

    async def to_be_visible(self, page: 'Page', validation: 'ValidationStep',
                            target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert that the target is visible."""
        target = self.require_target(validation, target)

        await self.assertion(target, validation).to_be_visible(
            **make_options(validation.expect_options),
        )

    async def to_be_hidden(self, page: 'Page', validation: 'ValidationStep',
                           target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert that the target is hidden or detached."""
        target = self.require_target(validation, target)

        await self.assertion(target, validation).to_be_hidden(
            **make_options(validation.expect_options),
        )

    async def to_have_title(self, page: 'Page', validation: 'ValidationStep',
                            target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert the page title."""
        await self.assertion(page, validation).to_have_title(
            stringify(validation.data),
            **make_options(validation.expect_options),
        )

    async def to_have_url(self, page: 'Page', validation: 'ValidationStep',
                          target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert that the page URL matches a regular expression."""
        await self.assertion(page, validation).to_have_url(
            regexp(stringify(validation.data)),
            **make_options(validation.expect_options),
        )

    async def to_have_text(self, page: 'Page', validation: 'ValidationStep',
                           target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert the full text of the target."""
        target = self.require_target(validation, target)

        await self.assertion(target, validation).to_have_text(
            stringify(validation.data),
            **make_options(validation.expect_options),
        )

    async def to_have_value(self, page: 'Page', validation: 'ValidationStep',
                            target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert the input value of the target."""
        target = self.require_target(validation, target)

        await self.assertion(target, validation).to_have_value(
            stringify(validation.data),
            **make_options(validation.expect_options),
        )

    async def to_have_attribute(self, page: 'Page', validation: 'ValidationStep',
                                target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert an attribute value of the target.

        Raises:
            MissingAttributeKey: If `attribute` is not given.
        """
        if not validation.attribute:
            raise MissingAttributeKey

        target = self.require_target(validation, target)

        await self.assertion(target, validation).to_have_attribute(
            validation.attribute,
            stringify(validation.data),
            **make_options(validation.expect_options),
        )

    async def to_have_css(self, page: 'Page', validation: 'ValidationStep',
                          target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert a computed style property of the target.

        Raises:
            MissingCssPropertyKey: If `cssProperty` is not given.
        """
        if not validation.css_property:
            raise MissingCssPropertyKey

        target = self.require_target(validation, target)

        await self.assertion(target, validation).to_have_css(
            validation.css_property,
            stringify(validation.data),
            **make_options(validation.expect_options),
        )

    async def to_have_class(self, page: 'Page', validation: 'ValidationStep',
                            target: 'Locator | None', context: 'RunContext') -> None:  # noqa: ARG002
        """Assert that the class attribute of the target matches a regular expression."""
        target = self.require_target(validation, target)

        await self.assertion(target, validation).to_have_class(
            regexp(stringify(validation.data)),
            **make_options(validation.expect_options),
        )

    async def custom(self, page: 'Page', validation: 'ValidationStep',
                     target: 'Locator | None', context: 'RunContext') -> None:
        """Invoke a registered custom validation.

        The handler decides the outcome: raising any error fails the
        validation, returning normally passes it.

        Raises:
            CustomValidationNotFound: If `customName` is missing or unknown.
            ValidationFailure: If the handler raises.
        """
        handler = self.registry.get_validation(validation.custom_name)
        scope = ValidationScope(context, target=target, expect=self.expect)

        try:
            result = handler(page, validation, scope)
            if isawaitable(result):
                await result

        except (AssertionError, PlaywrightError):
            raise

        except Exception as base:
            raise ValidationFailure(
                validation.type,
                self.failure_message(validation, base),
            ) from base

"""Declarative custom handler definitions.

Custom handlers extend the fixed instruction set of the engine. A custom
action is invoked for steps with `action: custom`, a custom validation for
validations with `type: custom`; both are selected by `customName`.

Handlers are plain callables, usually coroutines. A handler signals
failure by raising; returning normally means success.
"""

from collections.abc import Awaitable, Callable

from playwright.async_api import Page
from pydantic import Field

from pytest_uiscenario.context import RunContext, ValidationScope
from pytest_uiscenario.models import SchemaModel
from pytest_uiscenario.names import HandlerName  # noqa: TC001
from pytest_uiscenario.schema import TestStep, ValidationStep

#: The handler receives the page, the step being executed, and the run
#: context it may read and update.
type ActionHandler = Callable[[Page, TestStep, RunContext], Awaitable[None] | None]

#: The handler receives the page, the validation being evaluated, and a
#: scope holding the run context plus `target` and `expect`.
type ValidationHandler = Callable[[Page, ValidationStep, ValidationScope], Awaitable[None] | None]


class CustomAction(SchemaModel):
    """Declarative custom action definition."""

    name: HandlerName = Field(
        title='Action name',
        description='Value of `customName` selecting this handler.',
    )

    handler: ActionHandler = Field(
        title='Action handler',
        description=(
            'Callable implementing the action. Receives the page, the step, '
            'and the mutable run context. Raises to signal failure.'
        ),
    )


class CustomValidation(SchemaModel):
    """Declarative custom validation definition."""

    name: HandlerName = Field(
        title='Validation name',
        description='Value of `customName` selecting this handler.',
    )

    handler: ValidationHandler = Field(
        title='Validation handler',
        description=(
            'Callable implementing the assertion. Receives the page, the '
            'validation, and the validation scope. Raises to signal failure; '
            'returning normally means the validation passed.'
        ),
    )

"""Validation step definitions.

A validation is an assertion evaluated after a step action, either
against its own element or against the element the step acted upon.
"""

from typing import Any

from pydantic import ConfigDict, Field, NonNegativeInt

from pytest_uiscenario.models import SchemaModel
from pytest_uiscenario.names import VALIDATION_TYPES, OptionalHandlerName  # noqa: TC001
from pytest_uiscenario.values import OptionalText, RuntimeValue  # noqa: TC001


class ValidationStep(SchemaModel):
    """Declarative assertion attached to a test step.

    The `type` field selects the assertion. It is kept as a plain string
    so that unknown types reach the evaluator, which decides whether to
    warn or fail.

    Keys the validation does not define (such as `path`, stored by
    form-based editors) are ignored, and empty strings in optional
    fields read as unset.
    """

    model_config = ConfigDict(extra='ignore')

    type: str = Field(
        title='Validation type',
        description='Assertion to evaluate.',
        examples=list(VALIDATION_TYPES),
    )

    selector: OptionalText = Field(
        default=None,
        title='Selector',
        description=(
            'Element the validation applies to.\n'
            'When omitted, the element the step acted upon is used.'
        ),
    )

    selector_type: OptionalText = Field(
        default=None,
        title='Selector strategy',
        description='One of `css` (default), `xpath`, `id`, `text`, `testId`.',
    )

    nth: NonNegativeInt | None = Field(
        default=None,
        title='Match index',
        description='Zero-based index into the elements matched by `selector`.',
    )

    data: RuntimeValue = Field(
        default=None,
        title='Expected value',
        description=(
            'Expected value. Rendered as text for exact comparisons and '
            'compiled as a regular expression for `toHaveURL` and `toHaveClass`.'
        ),
    )

    message: OptionalText = Field(
        default=None,
        title='Failure message',
        description='Message reported when the assertion fails.',
    )

    soft: bool = Field(
        default=False,
        title='Soft assertion',
        description=(
            'Record a failed assertion and continue instead of aborting the run.'
        ),
    )

    attribute: OptionalText = Field(
        default=None,
        title='Attribute name',
        description='Attribute checked by `toHaveAttribute`.',
    )

    css_property: OptionalText = Field(
        default=None,
        title='CSS property',
        description='Computed style property checked by `toHaveCSS`.',
    )

    custom_name: OptionalHandlerName = Field(
        default=None,
        title='Custom validation name',
        description='Registered validation handler used by `custom`.',
    )

    expect_options: dict[str, Any] = Field(
        default_factory=dict,
        title='Assertion options',
        description=(
            'Options forwarded to the assertion as keyword arguments, '
            'for example `timeout` or `ignoreCase`.'
        ),
    )

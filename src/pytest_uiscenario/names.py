"""Scenario instruction names and identifier validation rules.

This module defines the fixed instruction set understood by the execution
engine (actions, validation types, and selector strategies) together with
the pattern used for custom handler names.

Instruction fields in documents stay plain strings, so an unknown value is
reported by the engine when the step runs rather than when the document is
loaded. The literal types below are used as keys of the dispatch tables.
"""

from typing import Annotated, Literal, get_args

from pydantic import BeforeValidator, Field

from pytest_uiscenario.values import blank_to_none

#: Base pattern for handler identifiers.
_NAME_PATTERN = r'[a-zA-Z][\w]*'

type ActionName = Literal[
    'goto',
    'fill',
    'type',
    'click',
    'hover',
    'press',
    'upload',
    'waitForTimeout',
    'custom',
]

type ValidationType = Literal[
    'toBeVisible',
    'toBeHidden',
    'toHaveTitle',
    'toHaveURL',
    'toHaveText',
    'toHaveValue',
    'toHaveAttribute',
    'toHaveCSS',
    'toHaveClass',
    'custom',
]

type SelectorType = Literal['css', 'xpath', 'id', 'text', 'testId']

type ResolveFrom = Literal['cwd', 'none']

ACTIONS: tuple[str, ...] = get_args(ActionName.__value__)
VALIDATION_TYPES: tuple[str, ...] = get_args(ValidationType.__value__)
SELECTOR_TYPES: tuple[str, ...] = get_args(SelectorType.__value__)

HandlerName = Annotated[
    str, Field(
        pattern=rf'^({_NAME_PATTERN}\.)?{_NAME_PATTERN}$',
        title='Custom handler name',
        description=(
            'Name of a custom action or validation handler. '
            'A handler may be referenced either by a builtin name '
            '(for example, `selectWord`) or by a plugin-qualified name '
            'using dot notation (for example, `editor.selectWord`). '
            'Names are limited to ASCII letters, digits, and underscores.'
        ),
        examples=[
            'selectWord',
            'editor.selectWord',
        ],
    ),
]

#: Handler name as stored by form-based editors, where an unused
#: `customName` is saved as an empty string.
OptionalHandlerName = Annotated[HandlerName | None, BeforeValidator(blank_to_none)]

"""Errors and warnings raised by pytest-uiscenario.

Every error renders itself with the location of the failure (file,
step, matched element, validation) and, where available, a YAML dump
of the offending document fragment next to the run context.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from pydantic import SecretStr
from yaml import dump

from pytest_uiscenario.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint
    from typing import Self

    from pydantic import BaseModel
    from pydantic_core import ErrorDetails, ValidationError as PydanticValidationError

#: Marks the start of a rendered document fragment.
SNIPPET_HEADER = ' ...'
#: Separates the run context from the failing element.
SNIPPET_DIVIDER = ' ---'
SNIPPET_INDENT = 2

#: Shown instead of values that cannot be dumped (pages, locators).
OPAQUE_VALUE = '<runtime object>'
LOCATION_INDENT = ' ' * 4
ELEMENT_INDENT = ' ' * 8


class ErrorContext(TypedDict, total=False):
    """Where and on what an error happened.

    Every key is optional. Positions are zero-based and rendered
    one-based, except `iteration` which is the element index.
    """

    filename: str | None
    step_num: int | None
    iteration: int | None
    validation_num: int | None

    #: Exception that caused the error, if any.
    error: Exception | None

    #: Run context shared between steps.
    context: dict[str, Any] | None
    #: Document fragment the error refers to.
    element: Any


def sanitize(value: Any) -> Any:  # noqa: ANN401
    """Reduce a value to something YAML can dump without leaking secrets."""
    if isinstance(value, SecretStr):
        return str(value)

    if value is None or isinstance(value, SCALARS):
        return value

    if isinstance(value, MAPPINGS):
        return {key: sanitize(item) for key, item in value.items()}

    if isinstance(value, SEQUENCES):
        return [sanitize(item) for item in value]

    return OPAQUE_VALUE


def to_yaml(value: Any, indent: str = '') -> str:  # noqa: ANN401
    """Dump a value as block YAML, prefixing every non-blank line."""
    text = dump(sanitize(value), indent=SNIPPET_INDENT, sort_keys=False, allow_unicode=True)

    return linesep.join(indent + line for line in text.splitlines() if line.strip())


class ErrorFormatter:
    """Mixin rendering a message together with its `ErrorContext`."""

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Render the message followed by location and snippet lines."""
        if not context:
            return message

        lines = [message, *cls.describe_location(context), *cls.describe_element(context)]
        if len(lines) == 1:
            return message

        return linesep.join(lines)

    @staticmethod
    def describe_location(context: ErrorContext) -> list[str]:
        """Render the file and position lines of a context."""
        lines = []
        if filename := context.get('filename'):
            lines.append(f'{LOCATION_INDENT}in "{filename}"')

        step_num = context.get('step_num')
        if step_num is None:
            return lines

        position = [f'on step {step_num + 1}']
        if (iteration := context.get('iteration')) is not None:
            position.append(f'element {iteration}')
        if (validation_num := context.get('validation_num')) is not None:
            position.append(f'validation {validation_num + 1}')

        lines.append(LOCATION_INDENT + ', '.join(position))
        return lines

    @staticmethod
    def describe_element(context: ErrorContext) -> list[str]:
        """Render the run context and failing element as YAML."""
        element = context.get('element')
        if not element:
            return []

        lines = [ELEMENT_INDENT + SNIPPET_HEADER]
        if values := context.get('context'):
            lines.append(to_yaml({'context': dict(values)}, ELEMENT_INDENT))
            lines.append(ELEMENT_INDENT + SNIPPET_DIVIDER)

        lines.append(to_yaml(element, ELEMENT_INDENT))
        return lines


class PluginWarning(UserWarning):
    """Warning for a plugin that failed to load or a duplicate handler name.

    Raised as `PluginError` instead when the registry is strict.
    """


class ScenarioWarning(UserWarning):
    """Warning emitted for scenario files skipped by the loader."""


class UnsupportedValidationWarning(UserWarning):
    """Warning emitted when a validation type is not recognized.

    Unknown validation types pass without asserting anything unless the
    engine runs with strict validations.
    """


class ScenarioError(Exception, ErrorFormatter):
    """Root of the pytest-uiscenario error tree."""

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Keep the bare message apart from its rendering context."""
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        return self.format(self.message, self.context)


class PluginError(ScenarioError):
    """Error raised by a strict registry for a broken handler plugin."""

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Remember the entry point that could not be loaded."""
        self.entrypoint = entrypoint

        super().__init__(message)


class ScenarioSchemaError(ScenarioError):
    """Error raised when a scenario document is invalid."""

    @classmethod
    def from_pydantic_error(cls, error: 'PydanticValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            filename: str | None = None) -> 'Self':
        """Translate a pydantic error into a document error.

        The first reported problem that can be traced back to the raw
        document names the error, and the fragment holding the bad
        value becomes the snippet.

        Args:
            error: Error raised while validating `data`.
            data: Raw parsed document.
            filename: Source of the document.

        Returns:
            Error describing the first locatable problem.
        """
        base = ErrorContext(filename=filename, error=error, element=data)

        if not isinstance(data, (dict, list)) or not data:
            return cls('Type validation error', context=base)

        for details in error.errors(include_url=False, include_input=False):
            found = cls._find_fragment(data, details)
            if found is not None:
                message, fragment = found
                return cls(message, context=ErrorContext({**base, 'element': fragment}))

        return cls('Validation error', context=base)

    @staticmethod
    def _find_fragment(data: Any,  # noqa: ANN401
                       details: 'ErrorDetails') -> tuple[str, Any] | None:
        """Follow an error location into the document.

        Returns the first line of the error message and the smallest
        fragment (a one-item list or mapping) holding the bad value, or
        None when the location leaves the document.
        """
        parent = node = data
        key: int | str | None = None

        for part in details['loc']:
            if isinstance(node, (list, tuple)):
                if isinstance(part, int) and 0 <= part < len(node):
                    parent, node, key = node, node[part], part
            elif isinstance(node, dict):
                if part in node:
                    parent, node, key = node, node[part], part
            else:
                return None

        if key is None:
            return None

        message = next(
            (line.strip() for line in (details.get('msg') or '').splitlines() if line.strip()),
            None,
        )
        if not message:
            return None

        if isinstance(parent, (list, tuple)):
            return message, [node]
        if isinstance(parent, dict):
            return message, {key: node}

        return None


class EmptyTestCase(ScenarioSchemaError):
    """Error raised when a test case without steps is executed."""


class UnsupportedSelectorType(ScenarioError):
    """Error raised for a selector strategy outside the supported set."""

    def __init__(self, selector_type: str) -> None:
        """Initialize the error.

        Args:
            selector_type: Rejected strategy value.
        """
        self.selector_type = selector_type

        super().__init__(f'Unsupported selector type: {selector_type!r}')


class ActionError(ScenarioError):
    """Error raised when a step action cannot be performed."""

    def __init__(self, action: str, reason: str) -> None:
        """Initialize an action error.

        Args:
            action: Name of the failing action.
            reason: Human-readable failure reason.
        """
        self.action = action
        self.reason = reason

        super().__init__(f'Action {action!r} failed: {reason}')


class UnsupportedAction(ActionError):
    """Error raised for an action outside the supported instruction set."""

    def __init__(self, action: str) -> None:
        """Initialize the error."""
        super().__init__(action, 'unsupported action')


class CustomActionNotFound(ActionError):
    """Error raised when a custom action handler is not registered."""

    def __init__(self, name: str | None) -> None:
        """Initialize the error."""
        self.name = name

        super().__init__('custom', f'custom action {name!r} is not registered')


class UploadTargetMissing(ActionError):
    """Error raised when an upload step has no file input target."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__('upload', 'upload requires a selector for a file input')


class NoUploadSource(ActionError):
    """Error raised when an upload step yields no files."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__('upload', 'no files given in `files` or `data`')


class TargetMissing(ActionError):
    """Error raised in strict-target mode when an element action has no target."""

    def __init__(self, action: str) -> None:
        """Initialize the error."""
        super().__init__(action, 'action requires a selector')


class ValidationError(ScenarioError):
    """Error raised when a validation cannot be evaluated or does not hold."""

    def __init__(self, type_: str, reason: str) -> None:
        """Initialize a validation error.

        Args:
            type_: Validation type.
            reason: Human-readable failure reason.
        """
        self.type = type_
        self.reason = reason

        super().__init__(f'Validation {type_!r} failed: {reason}')


class MissingSelector(ValidationError):
    """Error raised when an element validation has no target."""

    def __init__(self, type_: str) -> None:
        """Initialize the error."""
        super().__init__(type_, 'validation requires a selector')


class MissingAttributeKey(ValidationError):
    """Error raised when `toHaveAttribute` has no `attribute` key."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__('toHaveAttribute', "validation requires an 'attribute' key")


class MissingCssPropertyKey(ValidationError):
    """Error raised when `toHaveCSS` has no `cssProperty` key."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__('toHaveCSS', "validation requires a 'cssProperty' key")


class CustomValidationNotFound(ValidationError):
    """Error raised when a custom validation handler is not registered."""

    def __init__(self, name: str | None) -> None:
        """Initialize the error."""
        self.name = name

        super().__init__('custom', f'custom validation {name!r} is not registered')


class UnsupportedValidationType(ValidationError):
    """Error raised for an unknown validation type in strict mode."""

    def __init__(self, type_: str) -> None:
        """Initialize the error."""
        super().__init__(type_, 'unsupported validation type')


class ValidationFailure(ValidationError):
    """Error raised when an assertion did not hold.

    Only this error is relaxed by soft validations; every other
    validation error describes a broken document and is always hard.
    """

    def __init__(self, type_: str, message: str) -> None:
        """Initialize the failure.

        Args:
            type_: Validation type.
            message: Assertion message.
        """
        super().__init__(type_, message)


class StepError(ScenarioError):
    """Error raised while executing a step.

    Wraps the underlying failure together with the step location and a
    snippet of the failing document element.
    """

    @classmethod
    def from_pydantic_model(cls, model: 'BaseModel', *,  # noqa: PLR0913
                            message: str,
                            context: dict[str, Any] | None = None,
                            filename: str | None = None,
                            step_num: int | None = None,
                            iteration: int | None = None,
                            validation_num: int | None = None) -> 'Self':
        """Create a step error from a document model instance.

        Args:
            model: Step or validation model.
            message: Failure message.
            context: Run context at failure time.
            filename: An optional filename of source.
            step_num: Position of step.
            iteration: Index of the element when iterating.
            validation_num: Position of validation.

        Returns:
            StepError describing the failure.
        """
        error_context = ErrorContext(
            filename=filename,
            step_num=step_num,
            iteration=iteration,
            validation_num=validation_num,
            context=context,
            element=model.model_dump(
                exclude_none=True,
                exclude_unset=True,
            ),
        )

        return cls(message, context=error_context)

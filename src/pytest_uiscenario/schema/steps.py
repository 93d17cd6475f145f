"""Test step and uploaded file definitions."""

from typing import Any

from pydantic import ConfigDict, Field, NonNegativeInt

from pytest_uiscenario.models import SchemaModel
from pytest_uiscenario.names import ACTIONS, OptionalHandlerName, ResolveFrom  # noqa: TC001
from pytest_uiscenario.values import OptionalText, RuntimeValue  # noqa: TC001

from .validations import ValidationStep  # noqa: TC001


class UploadFile(SchemaModel):
    """File assigned to a file input by an `upload` step.

    Either `path` points at a file on disk or `content_base64` carries
    the file content inline. Inline content wins when both are given.
    """

    path: str | None = Field(
        default=None,
        title='File path',
        description='Path of a file on disk, resolved according to `resolveFrom`.',
    )

    content_base64: str | None = Field(
        default=None,
        title='Inline content',
        description='Base64 encoded file content.',
    )

    name: str | None = Field(
        default=None,
        title='File name',
        description='Name announced for inline content (default `upload.bin`).',
    )

    mime_type: str | None = Field(
        default=None,
        title='MIME type',
        description='MIME type announced for inline content.',
    )


class TestStep(SchemaModel):
    """Single executable step of a test case.

    A step performs one action, optionally against an element located by
    `selector`, then waits and evaluates its validations. The `action`
    field is kept as a plain string so that unknown actions are reported
    by the dispatcher when the step runs.

    Keys the step does not define (such as the step level `soft` flag
    stored by form-based editors) are ignored, and empty strings in
    optional fields read as unset.
    """

    __test__ = False

    model_config = ConfigDict(extra='ignore')

    step_name: OptionalText = Field(
        default=None,
        title='Step name',
        description='Human-readable name used as the report entry title.',
    )

    action: str = Field(
        title='Action',
        description='Action performed by the step.',
        examples=list(ACTIONS),
    )

    selector: OptionalText = Field(
        default=None,
        title='Selector',
        description='Element the action applies to.',
    )

    selector_type: OptionalText = Field(
        default=None,
        title='Selector strategy',
        description='One of `css` (default), `xpath`, `id`, `text`, `testId`.',
    )

    path: OptionalText = Field(
        default=None,
        title='Navigation path',
        description='URL or path opened by `goto` (default `/`).',
    )

    data: RuntimeValue = Field(
        default=None,
        title='Action payload',
        description=(
            'Text typed by `fill`, `type` and `press`, file paths for '
            '`upload`, or arbitrary data for custom actions.'
        ),
    )

    nth: NonNegativeInt | None = Field(
        default=None,
        title='Match index',
        description='Zero-based index into the elements matched by `selector`.',
    )

    wait_time: NonNegativeInt | None = Field(
        default=None,
        title='Wait time',
        description='Milliseconds to wait after the action.',
    )

    iterate: bool = Field(
        default=False,
        title='Iterate matches',
        description=(
            'Run the action, the wait and the validations once per '
            'element matched by `selector`, in document order.'
        ),
    )

    custom_name: OptionalHandlerName = Field(
        default=None,
        title='Custom action name',
        description='Registered action handler used by `custom`.',
    )

    action_options: dict[str, Any] = Field(
        default_factory=dict,
        title='Action options',
        description='Options forwarded to the browser call as keyword arguments.',
    )

    files: list[UploadFile] = Field(
        default_factory=list,
        title='Uploaded files',
        description='Files assigned by `upload`.',
    )

    resolve_from: ResolveFrom = Field(
        default='cwd',
        title='Path resolution',
        description=(
            '`cwd` resolves relative upload paths against the working '
            'directory, `none` uses them verbatim.'
        ),
    )

    clear_first: bool = Field(
        default=False,
        title='Clear file input',
        description='Clear the file input before assigning new files.',
    )

    validations: list[ValidationStep] = Field(
        default_factory=list,
        title='Validations',
        description='Assertions evaluated after the action, in order.',
    )

    @property
    def title(self) -> str:
        """Return the step title used in reports."""
        if self.step_name:
            return self.step_name

        if self.selector:
            return f'{self.action} {self.selector}'

        if self.action == 'goto':
            return f'goto {self.path or "/"}'

        if self.action == 'custom' and self.custom_name:
            return f'custom {self.custom_name}'

        return self.action

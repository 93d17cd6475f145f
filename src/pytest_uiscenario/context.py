"""Run-scoped mutable context shared by steps and custom handlers."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from playwright.async_api import Locator


class RunContext(dict[str, Any]):
    """Mutable key-value store scoped to one test-case run.

    The engine creates one context per run and passes it by reference to
    every custom action, so handlers can hand values over to later steps
    (for example, a value captured on one page and typed on another).

    A context must never be shared between concurrent runs.
    """


class ValidationScope(dict[str, Any]):
    """Mapping handed to custom validation handlers.

    Contains every run context value plus the `target` locator the
    validation applies to (or `None`) and the `expect` assertion factory.
    """

    def __init__(self, context: RunContext, *,
                 target: 'Locator | None',
                 expect: Any) -> None:  # noqa: ANN401
        """Build the scope from a run context.

        Args:
            context: Current run context.
            target: Locator the validation applies to, if any.
            expect: Assertion factory used by built-in validations.
        """
        super().__init__(context)

        self['target'] = target
        self['expect'] = expect

    @property
    def target(self) -> 'Locator | None':
        """Return the validation target."""
        return self['target']

    @property
    def expect(self) -> Any:  # noqa: ANN401
        """Return the assertion factory."""
        return self['expect']

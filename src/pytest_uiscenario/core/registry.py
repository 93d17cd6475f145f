"""Custom logic registry and plugin loading.

The registry maps custom handler names to callables in two independent
namespaces: actions and validations. It is an explicit object injected
into the engine, so several engines with different extensions can coexist.

A broken plugin is reported with a `PluginWarning` and skipped, unless
the registry is strict, in which case a `PluginError` is raised.
"""

from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError

from pytest_uiscenario.builtins import actions, validations
from pytest_uiscenario.errors import (
    CustomActionNotFound,
    CustomValidationNotFound,
    PluginError,
    PluginWarning,
)
from pytest_uiscenario.extensions import Plugin

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

    from pytest_uiscenario.extensions import (
        ActionHandler,
        CustomAction,
        CustomValidation,
        ValidationHandler,
    )

#: Entry point group scanned for plugins.
PLUGINS_GROUP = 'uiscenario_plugins'


class CustomLogicRegistry:
    """Name to handler lookup for custom actions and validations.

    Built-in handlers are registered first, then plugins exposed through
    the `uiscenario_plugins` entry point group. Hosting applications may
    add their own handlers with `add_action` and `add_validation` before
    a run starts.

    Attributes:
        strict: Raise on plugin problems and name clashes instead of warning.
        actions: Registered custom action handlers.
        validations: Registered custom validation handlers.
    """

    def __init__(self, strict: bool = False, auto_load: bool = True) -> None:
        """Register built-in handlers and, optionally, installed plugins.

        Raises:
            PluginError: If a plugin is broken and the registry is strict.
        """
        self.strict = strict

        self.actions: dict[str, ActionHandler] = {}
        self.validations: dict[str, ValidationHandler] = {}

        self.add_action(actions.select_word)
        self.add_action(actions.query_response)

        self.add_validation(validations.contains_text)

        if auto_load:
            self.load_plugins()

    def add_action(self, action: 'CustomAction',
                   entrypoint: 'EntryPoint | None' = None,
                   namespace: str | None = None) -> None:
        """Register a custom action under its (namespaced) name.

        Raises:
            PluginError: If the name is taken and the registry is strict.
        """
        name = self.qualify(action.name, namespace)
        if name in self.actions:
            self.report(
                f'Custom action {name!r} from {self.origin(action, entrypoint)!r} '
                'is shadowing an existing',
                entrypoint,
            )

        self.actions[name] = action.handler

    def add_validation(self, validation: 'CustomValidation',
                       entrypoint: 'EntryPoint | None' = None,
                       namespace: str | None = None) -> None:
        """Register a custom validation under its (namespaced) name.

        Raises:
            PluginError: If the name is taken and the registry is strict.
        """
        name = self.qualify(validation.name, namespace)
        if name in self.validations:
            self.report(
                f'Custom validation {name!r} from {self.origin(validation, entrypoint)!r} '
                'is shadowing an existing',
                entrypoint,
            )

        self.validations[name] = validation.handler

    def get_action(self, name: str | None) -> 'ActionHandler':
        """Return the handler registered for a `customName`.

        Raises:
            CustomActionNotFound: If the name is missing or unknown.
        """
        if not name or name not in self.actions:
            raise CustomActionNotFound(name)

        return self.actions[name]

    def get_validation(self, name: str | None) -> 'ValidationHandler':
        """Return the handler registered for a `customName`.

        Raises:
            CustomValidationNotFound: If the name is missing or unknown.
        """
        if not name or name not in self.validations:
            raise CustomValidationNotFound(name)

        return self.validations[name]

    @staticmethod
    def qualify(name: str, namespace: str | None = None) -> str:
        """Prefix a handler name with its plugin namespace."""
        return f'{namespace}.{name}' if namespace else name

    @staticmethod
    def origin(item: 'CustomAction | CustomValidation',
               entrypoint: 'EntryPoint | None' = None) -> str:
        """Name where a definition comes from, for diagnostics."""
        if entrypoint:
            return entrypoint.value

        return getattr(item.handler, '__module__', None) or item.__module__

    def report(self, message: str, entrypoint: 'EntryPoint | None' = None,
               cause: Exception | None = None) -> None:
        """Warn about a plugin problem, or raise it when strict.

        Raises:
            PluginError: If the registry is strict.
        """
        if self.strict:
            raise PluginError(message, entrypoint=entrypoint) from cause

        warn(message, category=PluginWarning, stacklevel=3)

    def load_plugin(self, entrypoint: 'EntryPoint') -> None:
        """Load one entry point and register the handlers of its plugin.

        Raises:
            PluginError: If the plugin is broken and the registry is strict.
        """
        try:
            plugin = entrypoint.load()
        except ValidationError as base:
            self.report(f'Failed to validate entrypoint {entrypoint.name!r}', entrypoint, base)
            return
        except Exception as base:  # noqa: BLE001
            self.report(f'Failed to load entrypoint {entrypoint.name!r}', entrypoint, base)
            return

        if not isinstance(plugin, Plugin):
            self.report(f'Loaded from entrypoint {entrypoint.name!r} object is not a plugin', entrypoint)
            return

        for action in plugin.actions:
            self.add_action(action, entrypoint, namespace=plugin.name)

        for validation in plugin.validations:
            self.add_validation(validation, entrypoint, namespace=plugin.name)

    def load_plugins(self) -> None:
        """Load every plugin of the `uiscenario_plugins` entry point group.

        Raises:
            PluginError: If a plugin is broken and the registry is strict.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=PLUGINS_GROUP):
            self.load_plugin(entrypoint)

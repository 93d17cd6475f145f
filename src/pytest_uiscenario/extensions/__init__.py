"""Declarative extension plugin definition.

This module defines the top-level declarative container used to describe
custom handlers provided by a pytest-uiscenario plugin.

A plugin aggregates custom actions and custom validations. The plugin
model itself contains no execution logic; it is consumed by the custom
logic registry (`pytest_uiscenario.core.CustomLogicRegistry`) during
initialization, which registers each handler under the plugin namespace
(`<plugin>.<name>`).

Plugins are exposed through the `uiscenario_plugins` entry point group:

    [project.entry-points.uiscenario_plugins]
    editor = "my_package.scenario:plugin"
"""

from pydantic import Field

from pytest_uiscenario.models import SchemaModel
from pytest_uiscenario.names import HandlerName  # noqa: TC001

from .handlers import ActionHandler, CustomAction, CustomValidation, ValidationHandler

__all__ = (
    'ActionHandler',
    'CustomAction',
    'CustomValidation',
    'Plugin',
    'ValidationHandler',
)


class Plugin(SchemaModel):
    """Declarative container for custom handler extensions.

    All contained elements are optional, allowing plugins to provide
    only actions or only validations.
    """

    name: HandlerName = Field(
        title='Plugin namespace',
        description=(
            'Logical namespace of the plugin. '
            'Handlers are registered as `<namespace>.<name>`.'
        ),
    )

    actions: list[CustomAction] = Field(
        default_factory=list,
        title='Custom actions',
        description='Custom action handlers provided by the plugin.',
    )

    validations: list[CustomValidation] = Field(
        default_factory=list,
        title='Custom validations',
        description='Custom validation handlers provided by the plugin.',
    )

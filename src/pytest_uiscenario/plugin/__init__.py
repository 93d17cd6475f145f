"""Pytest plugin for collecting and executing UI scenario files.

This module integrates the scenario engine with pytest by:
- registering custom command-line options;
- resolving engine settings and a shared handler registry;
- collecting scenario files as executable test cases.

Files matching the pattern `test_*.json`, `test_*.yaml`, or `test_*.yml`
are automatically collected; each enabled test case becomes a pytest item.
"""

from re import match
from typing import TYPE_CHECKING

from pydantic import SecretStr

from .spec import ScenarioFile

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser
    from _pytest.nodes import Node


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for pytest-uiscenario.

    Args:
        parser: Pytest argument parser.
    """
    group = parser.getgroup('uiscenario', 'UI scenario execution')

    group.addoption(
        '--uiscenario-base-url',
        dest='uiscenario_base_url',
        default=None,
        help='Base URL that relative `goto` paths resolve against.',
    )
    group.addoption(
        '--uiscenario-browser',
        dest='uiscenario_browser',
        choices=('chromium', 'firefox', 'webkit'),
        default=None,
        help='Browser engine used to run scenarios.',
    )
    group.addoption(
        '--uiscenario-headed',
        action='store_true',
        dest='uiscenario_headed',
        default=False,
        help='Run the browser with a visible window.',
    )
    group.addoption(
        '--uiscenario-strict',
        action='store_true',
        dest='uiscenario_strict',
        default=False,
        help=(
            'Enable strict execution. Element actions without a selector, '
            'unknown validation types, and plugin loading errors '
            'will cause test collection or execution to fail.'
        ),
    )
    group.addoption(
        '--uiscenario-token',
        dest='uiscenario_token',
        default=None,
        help='Value substituted for `${TOKEN}` in `goto` paths.',
    )


def pytest_configure(config: 'Config') -> None:
    """Configure pytest-uiscenario integration.

    This hook resolves the engine settings (environment first, then
    command-line options) and a shared custom handler registry, and
    attaches them to the pytest configuration object as
    `config.uiscenario_settings` and `config.uiscenario_registry`.

    Args:
        config: Pytest configuration object.
    """
    from pytest_uiscenario.core import CustomLogicRegistry  # noqa: PLC0415
    from pytest_uiscenario.settings import EngineSettings  # noqa: PLC0415

    overrides: dict[str, object] = {}
    if base_url := config.getoption('--uiscenario-base-url', default=None):
        overrides['base_url'] = base_url
    if browser := config.getoption('--uiscenario-browser', default=None):
        overrides['browser'] = browser
    if token := config.getoption('--uiscenario-token', default=None):
        overrides['token'] = SecretStr(token)
    if config.getoption('--uiscenario-headed', default=False):
        overrides['headless'] = False
    if config.getoption('--uiscenario-strict', default=False):
        overrides.update(strict=True, strict_targets=True, strict_validations=True)

    settings = EngineSettings().model_copy(update=overrides)

    config.uiscenario_settings = settings  # type: ignore[attr-defined]
    config.uiscenario_registry = CustomLogicRegistry(  # type: ignore[attr-defined]
        strict=settings.strict,
    )


def pytest_collect_file(parent: 'Node', file_path: 'Path') -> ScenarioFile | None:
    """Collect scenario files.

    Files matching the pattern `test_*.json`, `test_*.yaml`, or
    `test_*.yml` are treated as scenario files and collected using
    `ScenarioFile`.

    Args:
        parent: Parent pytest collection node.
        file_path: Path to the file being considered.

    Returns:
        A `ScenarioFile` collector if the file matches the pattern, otherwise ``None``.
    """
    if match(r'^test_.+\.(json|ya?ml)$', file_path.name):
        return ScenarioFile.from_parent(
            parent,
            path=file_path,
        )

    return None

"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING

import pytest
from playwright.async_api import Locator, Page

from pytest_uiscenario.core import CustomLogicRegistry, ScenarioEngine
from pytest_uiscenario.settings import EngineSettings

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from pytest_uiscenario.extensions import Plugin

pytest_plugins = ('pytester',)


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Fake the installed `uiscenario_plugins` entry points.

    Each positional object becomes one entry point loading it; `raises`
    makes every `load()` fail instead.
    """
    def patch(*plugins: 'Plugin | object', raises: Exception | None = None) -> 'MockType':

        entrypoints = []
        for plugin in plugins:
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = 'uiscenario_plugins'
            ep.name = 'tests'
            ep.value = 'tests.plugins:plugin'
            ep.load.return_value = plugin
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch


@pytest.fixture
def registry() -> CustomLogicRegistry:
    """Provide a registry with builtin handlers and no entry point plugins."""
    return CustomLogicRegistry(auto_load=False)


@pytest.fixture
def make_locator(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory of Playwright locator doubles.

    A locator created with `elements` reports their number from `count()`
    and returns them from `nth()`; without elements `nth()` returns the
    locator itself.
    """
    def make(*elements: 'MockType') -> 'MockType':
        locator = mocker.MagicMock(spec=Locator)
        locator.count.return_value = len(elements)
        if elements:
            locator.nth.side_effect = lambda index: elements[index]
        else:
            locator.nth.return_value = locator
        return locator

    return make


@pytest.fixture
def locator(make_locator: 'Callable[..., MockType]') -> 'MockType':
    """Provide the locator double returned by the page fixture."""
    return make_locator()


@pytest.fixture
def page(mocker: 'MockerFixture', locator: 'MockType') -> 'MockType':
    """Provide a Playwright page double.

    Every selector resolves to the `locator` fixture. Mouse and keyboard
    are asynchronous doubles.
    """
    page = mocker.MagicMock(spec=Page)
    page.locator.return_value = locator
    page.get_by_test_id.return_value = locator
    page.mouse = mocker.AsyncMock()
    page.keyboard = mocker.AsyncMock()
    return page


@pytest.fixture
def assertion(mocker: 'MockerFixture') -> 'MockType':
    """Provide the assertion object produced by the `expect` double."""
    return mocker.AsyncMock()


@pytest.fixture
def expect(mocker: 'MockerFixture', assertion: 'MockType') -> 'MockType':
    """Provide an `expect` double returning the `assertion` fixture."""
    return mocker.Mock(return_value=assertion)


@pytest.fixture
def engine(registry: CustomLogicRegistry, expect: 'MockType') -> ScenarioEngine:
    """Provide an engine with default settings and a mocked `expect`."""
    return ScenarioEngine(registry, EngineSettings(), expect=expect)

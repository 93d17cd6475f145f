"""Tests for the pytest integration."""

from contextlib import asynccontextmanager
from json import dumps
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType


PASSING_CASE = {
    'description': 'Open home',
    'testSteps': [{'action': 'goto', 'path': '/home/${TOKEN}'}],
}

FAILING_CASE = {
    'description': 'Scroll',
    'testSteps': [{'action': 'scroll'}],
}


@pytest.fixture
def session(mocker: 'MockerFixture', page: 'MockType') -> 'MockType':
    """Replace the browser session of scenario items with a page double."""
    session = mocker.Mock()
    session.new_page = mocker.AsyncMock(return_value=page)

    @asynccontextmanager
    async def open_session(settings: object) -> 'AsyncIterator[MockType]':
        session.settings = settings
        yield session

    mocker.patch('pytest_uiscenario.plugin.case.open_session', open_session)

    return session


def test_collect_and_run(pytester: pytest.Pytester, session: 'MockType', page: 'MockType') -> None:
    """Run every enabled case of collected scenario files."""
    pytester.makefile('.json', test_home=dumps(PASSING_CASE))
    pytester.makefile('.yaml', test_cases=dumps([
        {**PASSING_CASE, 'description': 'disabled', 'enabled': False},
        FAILING_CASE,
    ]))
    pytester.makefile('.json', other=dumps(FAILING_CASE))

    result = pytester.runpytest_inprocess('--uiscenario-token', 'abc')

    result.assert_outcomes(passed=1, failed=1)
    result.stdout.fnmatch_lines(['*Scroll: failed (aborted)*'])
    page.goto.assert_awaited_once_with('/home/abc')
    assert session.settings.token.get_secret_value() == 'abc'


def test_item_names(pytester: pytest.Pytester, session: 'MockType') -> None:  # noqa: ARG001
    """Name items after the file and the case position."""
    pytester.makefile('.yml', test_pair=dumps([
        {**PASSING_CASE, 'testOrder': 2},
        {**PASSING_CASE, 'testOrder': 1},
    ]))

    result = pytester.runpytest_inprocess('--collect-only', '-q')

    result.stdout.fnmatch_lines([
        '*test_pair.yml::test_pair[[]0[]]',
        '*test_pair.yml::test_pair[[]1[]]',
    ])


def test_options(pytester: pytest.Pytester, session: 'MockType') -> None:
    """Apply command-line options to the settings."""
    pytester.makefile('.json', test_home=dumps(PASSING_CASE))

    result = pytester.runpytest_inprocess(
        '--uiscenario-base-url', 'http://localhost:8080',
        '--uiscenario-browser', 'firefox',
        '--uiscenario-headed',
        '--uiscenario-strict',
    )

    result.assert_outcomes(passed=1)
    settings = session.settings
    assert settings.base_url == 'http://localhost:8080'
    assert settings.browser == 'firefox'
    assert not settings.headless
    assert settings.strict_targets
    assert settings.strict_validations


def test_invalid_document(pytester: pytest.Pytester) -> None:
    """Report invalid documents as collection errors."""
    pytester.makefile('.json', test_broken=dumps({'testSteps': [{'action': 'click', 'waitTime': 'soon'}]}))

    result = pytester.runpytest_inprocess()

    result.assert_outcomes(errors=1)

"""Tests for the command-line utilities."""

from datetime import UTC, datetime
from json import dumps, loads
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from pytest_uiscenario.__main__ import cli
from pytest_uiscenario.errors import ScenarioWarning
from pytest_uiscenario.schema import RunReport, RunState, Status, StepResult

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture, MockType


NOW = datetime(2024, 5, 1, tzinfo=UTC)

CASE = {
    'description': 'Open home',
    'testSteps': [{'action': 'goto', 'path': '/'}],
}


def make_report(status: Status) -> RunReport:
    """Build a one-step report."""
    return RunReport(
        title='Open home',
        state=RunState.COMPLETED if status is Status.PASSED else RunState.ABORTED,
        start_time=NOW,
        end_time=NOW,
        steps=[StepResult(
            title='goto /',
            status=status,
            start_time=NOW,
            end_time=NOW,
            error=None if status is Status.PASSED else 'navigation failed',
        )],
    )


@pytest.fixture
def run_cases(mocker: 'MockerFixture') -> 'MockType':
    """Replace browser execution with canned reports."""
    return mocker.patch(
        'pytest_uiscenario.__main__.run_cases',
        new_callable=mocker.AsyncMock,
        return_value=[make_report(Status.PASSED)],
    )


def test_schema() -> None:
    """Print the JSON Schema of test cases."""
    result = CliRunner().invoke(cli, ['schema'])

    assert result.exit_code == 0
    schema = loads(result.output)
    assert schema['title'] == 'pytest-uiscenario'
    assert 'testSteps' in schema['properties']
    assert 'waitForTimeout' in schema['$defs']['TestStep']['properties']['action']['examples']


def test_run(tmp_path: 'Path', run_cases: 'MockType') -> None:
    """Run a scenario file and print the report."""
    source = tmp_path / 'home.json'
    source.write_text(dumps(CASE))

    result = CliRunner().invoke(cli, ['run', str(source), '--base-url', 'http://localhost:3000'])

    assert result.exit_code == 0, result.output
    assert 'Open home: passed (completed)' in result.output

    (cases, settings), options = run_cases.await_args
    assert [case.description for case in cases] == ['Open home']
    assert settings.base_url == 'http://localhost:3000'
    assert options == {'shared_page': False}


def test_run_directory(tmp_path: 'Path', run_cases: 'MockType') -> None:
    """Run the enabled cases of a directory."""
    (tmp_path / 'a.json').write_text(dumps({**CASE, 'description': 'second', 'testOrder': 2}))
    (tmp_path / 'b.json').write_text(dumps({**CASE, 'description': 'first', 'testOrder': 1}))
    (tmp_path / 'c.json').write_text(dumps({**CASE, 'enabled': False}))

    result = CliRunner().invoke(cli, ['run', str(tmp_path), '--shared-page'])

    assert result.exit_code == 0, result.output
    (cases, _), options = run_cases.await_args
    assert [case.description for case in cases] == ['first', 'second']
    assert options == {'shared_page': True}


def test_run_failed(tmp_path: 'Path', run_cases: 'MockType') -> None:
    """Exit with status 1 when a case failed."""
    run_cases.return_value = [make_report(Status.PASSED), make_report(Status.FAILED)]
    source = tmp_path / 'home.json'
    source.write_text(dumps(CASE))

    result = CliRunner().invoke(cli, ['run', str(source), '--json'])

    assert result.exit_code == 1
    reports = loads(result.output)
    assert [report['status'] for report in reports] == ['passed', 'failed']
    assert reports[1]['steps'][0]['error'] == 'navigation failed'


def test_run_invalid(tmp_path: 'Path', run_cases: 'MockType') -> None:
    """Report invalid documents as usage errors."""
    source = tmp_path / 'broken.json'
    source.write_text('{')

    result = CliRunner().invoke(cli, ['run', str(source)])

    assert result.exit_code == 1
    assert 'Failed to parse document' in result.output
    run_cases.assert_not_called()


def test_run_skips_empty_case(tmp_path: 'Path', run_cases: 'MockType') -> None:
    """Run the rest of a batch when a case has no steps."""
    (tmp_path / 'a.json').write_text(dumps({**CASE, 'testOrder': 1}))
    (tmp_path / 'b.json').write_text(dumps({'description': 'Draft', 'testOrder': 2, 'testSteps': []}))

    with pytest.warns(ScenarioWarning, match="'Draft': no steps"):
        result = CliRunner().invoke(cli, ['run', str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert 'Open home: passed (completed)' in result.output

    (cases, _), _ = run_cases.await_args
    assert [case.description for case in cases] == ['Open home']

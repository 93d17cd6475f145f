"""Command-line utilities for pytest-uiscenario.

`schema` prints the JSON Schema of scenario documents; `run` executes
scenario files and directories outside of pytest.
"""

from asyncio import run as run_async
from json import dumps
from pathlib import Path
from typing import TYPE_CHECKING
from warnings import warn

from click import Choice, echo, group, option
from click import Path as PathParam
from click import argument
from click.exceptions import ClickException, Exit

from pytest_uiscenario.browser import open_session
from pytest_uiscenario.core import CustomLogicRegistry, ScenarioEngine
from pytest_uiscenario.errors import ScenarioError, ScenarioWarning
from pytest_uiscenario.jsonschema import SchemaGenerator
from pytest_uiscenario.loader import load_directory, load_file, sort_cases, substitute_token
from pytest_uiscenario.settings import EngineSettings

if TYPE_CHECKING:
    from pytest_uiscenario.schema import RunReport, TestCase

InputPath = PathParam(
    exists=True,
    readable=True,
    path_type=Path,
)


@group(help='Command-line utilities for UI scenario execution.')
def cli() -> None:
    """Root CLI group for pytest-uiscenario tools."""
    return None


@cli.command(
    name='schema',
    help='Print the scenario JSON Schema to standard output.',
)
def print_schema() -> None:
    """Generate and print the JSON Schema."""
    echo(SchemaGenerator.make_schema())


def collect_cases(paths: tuple[Path, ...], settings: EngineSettings) -> list['TestCase']:
    """Load the runnable cases of files and directories.

    Cases without steps cannot run; they are skipped with a
    `ScenarioWarning` so the rest of the batch still runs.

    Args:
        paths: Scenario files and directories, in command-line order.
        settings: Settings providing the token and the strictness.

    Returns:
        Enabled cases; each path contributes a batch sorted by `testOrder`.
    """
    token = settings.token.get_secret_value() if settings.token else None

    cases: list[TestCase] = []
    for path in paths:
        if path.is_dir():
            cases.extend(load_directory(path, token=token, strict=settings.strict))
            continue

        loaded = [case for case in load_file(path) if case.enabled]
        if token is not None:
            loaded = [substitute_token(case, token) for case in loaded]
        cases.extend(sort_cases(loaded))

    runnable: list[TestCase] = []
    for case in cases:
        if not case.test_steps:
            warn(
                f'Skipping test case {case.description!r}: no steps',
                category=ScenarioWarning,
                stacklevel=2,
            )
            continue
        runnable.append(case)

    return runnable


async def run_cases(cases: list['TestCase'], settings: EngineSettings, *,
                    shared_page: bool = False) -> list['RunReport']:
    """Run cases sequentially in one browser session.

    Args:
        cases: Cases to run.
        settings: Engine and browser settings.
        shared_page: Whether all cases reuse one page.

    Returns:
        One report per case.
    """
    engine = ScenarioEngine(CustomLogicRegistry(strict=settings.strict), settings)

    reports: list[RunReport] = []
    async with open_session(settings) as session:
        page = await session.new_page() if shared_page else None
        for case in cases:
            if not shared_page:
                page = await session.new_page()
            reports.append(await engine.run(case, page))  # type: ignore[arg-type]

    return reports


@cli.command(
    name='run',
    help='Run scenario files and directories in a browser.',
)
@option('--base-url', help='Base URL that relative `goto` paths resolve against.')
@option(
    '--browser',
    type=Choice(['chromium', 'firefox', 'webkit']),
    help='Browser engine used to run scenarios.',
)
@option('--headed', is_flag=True, help='Run the browser with a visible window.')
@option('--shared-page', is_flag=True, help='Reuse one page for every case.')
@option('--json', 'as_json', is_flag=True, help='Print reports as JSON.')
@argument('paths', nargs=-1, required=True, type=InputPath)
def run_scenarios(paths: tuple[Path, ...], base_url: str | None,  # noqa: PLR0913
                  browser: str | None, headed: bool,
                  shared_page: bool, as_json: bool) -> None:
    """Run scenarios and print their reports.

    Exits with status 1 if any case failed.
    """
    overrides: dict[str, object] = {}
    if base_url:
        overrides['base_url'] = base_url
    if browser:
        overrides['browser'] = browser
    if headed:
        overrides['headless'] = False

    settings = EngineSettings().model_copy(update=overrides)

    try:
        cases = collect_cases(paths, settings)
        reports = run_async(run_cases(cases, settings, shared_page=shared_page))

    except ScenarioError as base:
        raise ClickException(f'{base}') from base

    if as_json:
        echo(dumps(
            [report.model_dump(mode='json') for report in reports],
            ensure_ascii=False,
            indent=4,
        ))
    else:
        for report in reports:
            echo(report.format())

    if not all(report.passed for report in reports):
        raise Exit(1)


if __name__ == '__main__':
    cli()

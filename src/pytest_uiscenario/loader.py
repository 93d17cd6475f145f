"""Scenario document loading.

Scenario files hold one test case or a list of test cases, written as
JSON (`.json`) or YAML (`.yaml`, `.yml`). YAML documents are always read
with the safe loader.

Directory loading prepares a runnable batch: disabled cases are dropped,
the `${TOKEN}` placeholder in `goto` paths is substituted, and the
batch is sorted by `testOrder`.
"""

from json import JSONDecodeError, loads
from typing import TYPE_CHECKING, Any
from warnings import warn

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from yaml import YAMLError, safe_load

from pytest_uiscenario.errors import ErrorContext, ScenarioSchemaError, ScenarioWarning
from pytest_uiscenario.schema import TestCase

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from pydantic import SecretStr

#: Placeholder replaced in `goto` paths.
TOKEN_PLACEHOLDER = '${TOKEN}'

#: Recognized scenario file suffixes.
SUFFIXES = frozenset({'.json', '.yaml', '.yml'})

_CASES = TypeAdapter(TestCase | list[TestCase])


def parse_content(content: str, *, suffix: str = '.json',
                  filename: str | None = None) -> list[TestCase]:
    """Parse and validate a scenario document.

    Args:
        content: Raw document text.
        suffix: File suffix selecting the format.
        filename: Source name used in error messages.

    Returns:
        Validated test cases in document order.

    Raises:
        ScenarioSchemaError: If the document cannot be parsed or validated.
    """
    try:
        data: Any = loads(content) if suffix == '.json' else safe_load(content)

    except (JSONDecodeError, YAMLError) as base:
        raise ScenarioSchemaError(
            f'Failed to parse document: {base}',
            context=ErrorContext(filename=filename, error=base),
        ) from base

    try:
        cases = _CASES.validate_python(data)

    except PydanticValidationError as base:
        raise ScenarioSchemaError.from_pydantic_error(
            base,
            data=data,
            filename=filename,
        ) from base

    if isinstance(cases, TestCase):
        return [cases]

    return cases


def load_file(path: 'Path') -> list[TestCase]:
    """Load test cases from a scenario file.

    Args:
        path: Path to a `.json`, `.yaml`, or `.yml` file.

    Returns:
        Validated test cases in document order.

    Raises:
        ScenarioSchemaError: If the file cannot be read, decoded, parsed,
            or validated.
    """
    try:
        content = path.read_text(encoding='utf-8')

    except (OSError, UnicodeDecodeError) as base:
        raise ScenarioSchemaError(
            f'Failed to read document: {base}',
            context=ErrorContext(filename=f'{path}', error=base),
        ) from base

    return parse_content(
        content,
        suffix=path.suffix.lower(),
        filename=f'{path}',
    )


def substitute_token(case: TestCase, token: str) -> TestCase:
    """Replace the token placeholder in `goto` paths of a case.

    Args:
        case: Test case to update.
        token: Replacement value.

    Returns:
        A copy of the case with substituted paths.
    """
    steps = [
        step.model_copy(update={'path': step.path.replace(TOKEN_PLACEHOLDER, token)})
        if step.action == 'goto' and step.path
        else step
        for step in case.test_steps
    ]

    return case.model_copy(update={'test_steps': steps})


def sort_cases(cases: 'Iterable[TestCase]') -> list[TestCase]:
    """Sort cases by `testOrder`.

    Numbered cases come first in ascending order; cases without an order
    follow in their original order.
    """
    cases = list(cases)

    numbered = sorted(
        (case for case in cases if case.test_order is not None),
        key=lambda case: case.test_order,  # type: ignore[arg-type,return-value]
    )

    return [*numbered, *(case for case in cases if case.test_order is None)]


def iter_files(directory: 'Path') -> 'Iterable[Path]':
    """Yield scenario files of a directory in name order."""
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix.lower() in SUFFIXES:
            yield path


def load_directory(directory: 'Path',
                   token: 'str | SecretStr | None' = None,
                   strict: bool = False) -> list[TestCase]:
    """Load a runnable batch of test cases from a directory.

    Args:
        directory: Directory with scenario files.
        token: Value substituted for `${TOKEN}` in `goto` paths.
        strict: Whether invalid files raise instead of being skipped.

    Returns:
        Enabled test cases sorted by `testOrder`.

    Raises:
        ScenarioSchemaError: If a file is invalid on strict mode.
    """
    if token is not None and not isinstance(token, str):
        token = token.get_secret_value()

    cases: list[TestCase] = []
    for path in iter_files(directory):
        try:
            loaded = load_file(path)

        except ScenarioSchemaError as base:
            if strict:
                raise
            warn(
                f'Skipping scenario file {path.name!r}: {base.message}',
                category=ScenarioWarning,
                stacklevel=2,
            )
            continue

        for case in loaded:
            if not case.enabled:
                continue
            if token is not None:
                case = substitute_token(case, token)  # noqa: PLW2901
            cases.append(case)

    return sort_cases(cases)

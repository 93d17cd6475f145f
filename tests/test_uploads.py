"""Tests for upload sources."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pytest_uiscenario.core.uploads import (
    collect_uploads,
    decode_payload,
    normalize_uploads,
    resolve_path,
)
from pytest_uiscenario.errors import ActionError, NoUploadSource
from pytest_uiscenario.schema import TestStep, UploadFile

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


def make_step(**fields: object) -> TestStep:
    """Build an upload step."""
    return TestStep.model_validate({
        'action': 'upload',
        'selector': 'input[type=file]',
        **fields,
    })


@pytest.mark.parametrize('value, resolve_from, expected', (
    pytest.param('docs/a.txt', 'cwd', '/work/docs/a.txt', id='relative'),
    pytest.param('/data/a.txt', 'cwd', '/data/a.txt', id='absolute'),
    pytest.param('C:\\data\\a.txt', 'cwd', 'C:\\data\\a.txt', id='drive backslash'),
    pytest.param('C:/data/a.txt', 'cwd', 'C:/data/a.txt', id='drive slash'),
    pytest.param('docs/a.txt', 'none', 'docs/a.txt', id='verbatim'),
))
def test_resolve_path(value: str, resolve_from: str, expected: str) -> None:
    """Resolve paths against the working directory."""
    assert resolve_path(value, resolve_from, Path('/work')) == expected  # type: ignore[arg-type]


def test_decode_payload() -> None:
    """Decode inline content into a named payload."""
    payload = decode_payload(UploadFile.model_validate({
        'contentBase64': 'aGVsbG8=',
        'name': 'a.txt',
    }))

    assert payload['buffer'] == b'hello'
    assert len(payload['buffer']) == 5
    assert payload['name'] == 'a.txt'
    assert payload['mimeType'] == 'application/octet-stream'


def test_decode_payload_defaults() -> None:
    """Name unnamed content `upload.bin`."""
    payload = decode_payload(UploadFile(content_base64=''))

    assert payload['name'] == 'upload.bin'
    assert payload['buffer'] == b''


def test_decode_payload_invalid() -> None:
    """Reject content that is not base64."""
    with pytest.raises(ActionError, match='invalid base64'):
        decode_payload(UploadFile(content_base64='not base64!', name='a.txt'))


def test_collect_files_first() -> None:
    """Prefer `files` over `data`."""
    uploads = collect_uploads(make_step(
        files=[{'path': '/data/a.txt'}, {'contentBase64': 'aGk=', 'name': 'b.txt'}],
        data='/data/ignored.txt',
    ))

    assert uploads[0] == '/data/a.txt'
    assert uploads[1]['name'] == 'b.txt'
    assert len(uploads) == 2


@pytest.mark.parametrize('data, expected', (
    pytest.param('/data/a.txt', ['/data/a.txt'], id='single'),
    pytest.param(['/data/a.txt', '', '/data/b.txt'], ['/data/a.txt', '/data/b.txt'], id='list'),
))
def test_collect_data(data: object, expected: list[str]) -> None:
    """Fall back to paths in `data`."""
    assert collect_uploads(make_step(data=data)) == expected


@pytest.mark.parametrize('fields', (
    pytest.param({}, id='nothing'),
    pytest.param({'data': 42}, id='number'),
    pytest.param({'files': [{'name': 'a.txt'}]}, id='empty entry'),
))
def test_collect_nothing(fields: dict) -> None:
    """Fail when no file is given."""
    with pytest.raises(NoUploadSource):
        collect_uploads(make_step(**fields))


def test_normalize_paths() -> None:
    """Keep homogeneous path lists."""
    assert normalize_uploads(['/a', '/b']) == ['/a', '/b']


def test_normalize_mixed(fs: 'FakeFilesystem') -> None:
    """Read paths into payloads when mixed with inline content."""
    fs.create_file('/data/report.csv', contents='a,b\n')
    inline = decode_payload(UploadFile(content_base64='aGk=', name='b.txt'))

    uploads = normalize_uploads(['/data/report.csv', inline])

    assert uploads[0]['name'] == 'report.csv'
    assert uploads[0]['mimeType'] == 'text/csv'
    assert uploads[0]['buffer'] == b'a,b\n'
    assert uploads[1] is inline

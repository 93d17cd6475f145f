"""File input sources of `upload` steps.

Files come either from the `files` list of a step (inline base64 content
or paths on disk) or, when that list yields nothing, from `data` holding
one path or a list of paths.
"""

from base64 import b64decode
from mimetypes import guess_type
from pathlib import Path, PureWindowsPath
from typing import TYPE_CHECKING

from playwright.async_api import FilePayload

from pytest_uiscenario.errors import ActionError, NoUploadSource

if TYPE_CHECKING:
    from pytest_uiscenario.names import ResolveFrom
    from pytest_uiscenario.schema import TestStep, UploadFile

DEFAULT_FILE_NAME = 'upload.bin'
DEFAULT_MIME_TYPE = 'application/octet-stream'

type Upload = str | FilePayload


def resolve_path(value: str, resolve_from: 'ResolveFrom' = 'cwd',
                 cwd: Path | None = None) -> str:
    """Resolve an upload path.

    With `cwd`, relative paths are joined to the working directory unless
    they are absolute or drive-rooted (`C:\\data`, `C:/data`). With `none`
    the path is used verbatim.

    Args:
        value: Path as written in the document.
        resolve_from: Resolution mode.
        cwd: Working directory, the process one when omitted.

    Returns:
        Resolved path.
    """
    if resolve_from == 'none':
        return value

    if Path(value).is_absolute() or PureWindowsPath(value).drive:
        return value

    return str((cwd or Path.cwd()) / value)


def decode_payload(item: 'UploadFile') -> FilePayload:
    """Decode an inline file entry.

    Args:
        item: File entry holding base64 content.

    Returns:
        File payload accepted by `Locator.set_input_files`.

    Raises:
        ActionError: If the content is not valid base64.
    """
    try:
        buffer = b64decode(item.content_base64 or '', validate=True)
    except ValueError as base:
        raise ActionError('upload', f'invalid base64 content for {item.name or DEFAULT_FILE_NAME!r}') from base

    return FilePayload(
        name=item.name or DEFAULT_FILE_NAME,
        mimeType=item.mime_type or DEFAULT_MIME_TYPE,
        buffer=buffer,
    )


def read_payload(path: str) -> FilePayload:
    """Read a file on disk into a payload.

    Args:
        path: Resolved file path.

    Returns:
        File payload named after the file.
    """
    filepath = Path(path)
    mime_type, _ = guess_type(filepath.name)

    return FilePayload(
        name=filepath.name,
        mimeType=mime_type or DEFAULT_MIME_TYPE,
        buffer=filepath.read_bytes(),
    )


def collect_uploads(step: 'TestStep', cwd: Path | None = None) -> list[Upload]:
    """Collect the files assigned by an `upload` step.

    Args:
        step: Upload step.
        cwd: Working directory for relative paths.

    Returns:
        Ordered files: payloads for inline content, paths otherwise.

    Raises:
        NoUploadSource: If neither `files` nor `data` yields a file.
    """
    uploads: list[Upload] = []

    for item in step.files:
        if item.content_base64 is not None:
            uploads.append(decode_payload(item))
        elif item.path:
            uploads.append(resolve_path(item.path, step.resolve_from, cwd))

    if not uploads:
        paths = step.data
        if isinstance(paths, str):
            paths = [paths]
        if isinstance(paths, (list, tuple)):
            uploads.extend(
                resolve_path(path, step.resolve_from, cwd)
                for path in paths
                if isinstance(path, str) and path
            )

    if not uploads:
        raise NoUploadSource

    return uploads


def normalize_uploads(uploads: list[Upload]) -> list[str] | list[FilePayload]:
    """Make a list of files acceptable to `set_input_files`.

    Playwright accepts either paths or payloads in one call. Mixed lists
    are turned into payloads by reading the paths from disk.

    Args:
        uploads: Collected files.

    Returns:
        A homogeneous list of paths or payloads.
    """
    if all(isinstance(item, str) for item in uploads):
        return [item for item in uploads if isinstance(item, str)]

    return [
        read_payload(item) if isinstance(item, str) else item
        for item in uploads
    ]

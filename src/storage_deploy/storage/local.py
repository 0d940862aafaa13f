"""Local directory enumeration, remote path mapping and MIME resolution."""

import mimetypes
import os
from pathlib import Path, PurePosixPath
from typing import List, Union

from storage_deploy.utils.errors import ConfigurationError

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def list_local_files(root: Union[str, Path]) -> List[Path]:
    """List every file under ``root`` depth-first.

    Entries of each directory are visited in name order and a directory's
    contents take its place in the output, so the order is stable for a
    given tree. Symlinked directories are not descended into.

    Raises:
        ConfigurationError: If ``root`` is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise ConfigurationError(f"Deployment path is not a directory: {root}")

    files: List[Path] = []
    stack = [iter(_sorted_entries(root))]

    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        if entry.is_dir(follow_symlinks=False):
            stack.append(iter(_sorted_entries(Path(entry.path))))
        elif entry.is_file():
            files.append(Path(entry.path))

    return files


def _sorted_entries(directory: Path) -> List[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def remote_path(version: str, root: Union[str, Path], file_path: Union[str, Path]) -> str:
    """Map a local file to ``<version>/<path relative to root>``.

    The result uses ``/`` separators and never starts with or doubles a slash.
    """
    relative = Path(file_path).relative_to(Path(root))
    return PurePosixPath(version.strip('/'), *relative.parts).as_posix()


def guess_content_type(filename: str) -> str:
    """Resolve a MIME type from the file name, defaulting to a binary type."""
    content_type, _ = mimetypes.guess_type(PurePosixPath(filename).name)
    return content_type or DEFAULT_CONTENT_TYPE

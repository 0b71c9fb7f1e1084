"""
Stateless file helpers used by the bulk-create screen: finding images in a
folder and handing their bytes over as base64.
"""

import base64
import logging
import os

from database.errors import IoFailure
from utils.constants import FORMAT_ALIASES

logger = logging.getLogger(__name__)


def extensions_for_format(fmt: str) -> list[str]:
    ext = fmt.lower().lstrip('.')
    return list(FORMAT_ALIASES.get(ext, [ext]))


def list_files_in_directory(directory: str, fmt: str) -> list[str]:
    """Full paths of files in `directory` whose extension matches `fmt`, sorted."""
    if not os.path.isdir(directory):
        raise IoFailure("Path is not a directory")

    extensions = extensions_for_format(fmt)
    try:
        entries = os.listdir(directory)
    except OSError as e:
        raise IoFailure(str(e)) from e

    paths = []
    for entry in entries:
        path = os.path.join(directory, entry)
        if not os.path.isfile(path):
            continue
        ext = os.path.splitext(entry)[1].lstrip('.').lower()
        if ext and ext in extensions:
            paths.append(path)
    paths.sort()
    return paths


def count_files_in_directory(directory: str, fmt: str) -> int:
    return len(list_files_in_directory(directory, fmt))


def read_file_base64(path: str) -> str:
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        logger.warning(f"read_file_base64 failed for {path}: {e}")
        raise IoFailure(str(e)) from e
    return base64.b64encode(data).decode('ascii')

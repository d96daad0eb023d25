"""Writing exported invoice files to disk."""

import logging
import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from timebill.domain.errors import ExportError, export_failed

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with ``_``."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


@contextmanager
def _staged_file(directory: Path) -> Iterator[tuple[int, str]]:
    """Create a temporary file in ``directory`` and always release it.

    The caller renames the file into place; if it doesn't, the file is removed.
    """
    fd, path = tempfile.mkstemp(dir=directory, prefix=".timebill-", suffix=".part")
    try:
        yield fd, path
    finally:
        if os.path.exists(path):
            os.unlink(path)


def write_export(output_dir: str | Path, filename: str, data: bytes, kind: str) -> Path:
    """Write a fully built export buffer as ``output_dir/filename``.

    Args:
        output_dir: Directory to write into (created if missing)
        filename: File name; unsafe characters are replaced
        data: Complete file contents
        kind: Export kind used in the error message, e.g. "CSV" or "PDF"

    Returns:
        Path of the written file

    Raises:
        ExportError: If the file cannot be written
    """
    directory = Path(output_dir)
    target = directory / sanitize_filename(filename)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        with _staged_file(directory) as (fd, staged_path):
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(staged_path, target)
    except OSError as e:
        logger.error("Writing %s failed: %s", target, e)
        raise ExportError(export_failed(kind)) from e

    logger.info("Exported %s (%d bytes)", target, len(data))
    return target

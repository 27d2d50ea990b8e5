"""Filesystem helpers shared by the file-backed repositories."""

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

TEMP_SUFFIX = ".tmp"


@contextmanager
def atomic_write(path: Path) -> Iterator[TextIO]:
    """Write to a temp file beside ``path`` and rename it into place.

    The temp file is removed on any exception, so readers only ever see the
    previous content or the complete new content.
    """
    fd, temp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=TEMP_SUFFIX
    )
    temp_path = Path(temp_name)
    try:
        handle = os.fdopen(fd, "w", encoding="utf-8", newline="")
    except BaseException:
        os.close(fd)
        temp_path.unlink(missing_ok=True)
        raise
    try:
        with handle:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def write_text_atomic(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` atomically."""
    with atomic_write(path) as handle:
        handle.write(content)

"""Atomic file writes for generated artifacts.

Generated files are consumed by later build steps, so a reader must never
observe a half-written file. :func:`atomic_write` writes to a temporary file
in the destination directory and renames it over the target.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. Content is encoded
    as UTF-8 with ``\\n`` line endings on every platform, so output is
    byte-identical wherever it is generated. The parent directory must
    already exist.

    Raises:
        OSError: If the directory is missing or not writable. The temp file
            is cleaned up before the error propagates.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="\n",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise

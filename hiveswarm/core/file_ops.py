# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/core/file_ops.py
"""
File I/O collaborators for the format codecs.

Readers return the whole file in memory; writers replace the target
atomically (temporary file + rename) so a failed conversion never leaves a
truncated output behind. OSError propagates unchanged.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable, Optional, Union

PathLike = Union[str, "os.PathLike[str]"]


@contextmanager
def atomic_write(
    target_path: PathLike,
    *,
    suffix: str = ".part",
    dir: Optional[Path] = None,
) -> Generator[Path, None, None]:
    """
    Context manager for atomic file writes using temporary file + rename.

    Yields the temporary path; on success it is renamed over `target_path`,
    on failure it is removed and the exception re-raised.

    Example:
        with atomic_write(Path("out.reg")) as temp_path:
            temp_path.write_bytes(data)
    """
    target_path = Path(target_path)
    temp_dir = Path(dir) if dir else target_path.parent
    temp_dir.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        suffix=suffix,
        prefix=f".{target_path.name}.",
        dir=str(temp_dir),
    )
    temp_path = Path(temp_name)

    try:
        os.close(fd)
        yield temp_path
        os.replace(temp_path, target_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def read_file_bytes(path: PathLike) -> bytes:
    """Whole file content."""
    return Path(path).read_bytes()


def write_file_bytes(path: PathLike, chunks: Union[bytes, Iterable[bytes]]) -> int:
    """
    Atomically replace `path` with `chunks` (one buffer or a sequence written
    in order). Returns the number of bytes written.
    """
    if isinstance(chunks, (bytes, bytearray)):
        chunks = [bytes(chunks)]
    total = 0
    with atomic_write(path) as temp_path:
        with open(temp_path, "wb") as f:
            for chunk in chunks:
                f.write(chunk)
                total += len(chunk)
            f.flush()
            os.fsync(f.fileno())
    return total

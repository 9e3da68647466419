"""
File helpers: whole-file reads that treat absence as normal, and crash-safe writes
"""

import os
from contextlib import suppress
from pathlib import Path
from typing import Optional, Union

from .logging import get_logger


logger = get_logger(__name__)


def read_file_if_exists(path: Union[str, Path]) -> Optional[bytes]:
    """Read the whole file, or return None if it does not exist.

    Any other OSError (permissions, a directory in the way, I/O errors)
    propagates to the caller.
    """
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        return None


def safe_write_file(path: Union[str, Path], data: bytes) -> None:
    """Write data to path so that a crash never leaves a truncated file.

    The content is staged in a temporary sibling, flushed to disk and then
    renamed over the destination.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temporary file first
    temp_file = path.with_name(path.name + ".tmp")
    try:
        with open(temp_file, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Atomic rename
        os.replace(temp_file, path)
    except OSError:
        with suppress(OSError):
            temp_file.unlink()
        raise

    logger.debug(f"Wrote {len(data)} bytes to {path}")

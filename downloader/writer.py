"""
File Writer
Writes stylesheets and font files with overwrite-or-skip semantics.
"""

import asyncio
import os
import uuid
from pathlib import Path
from typing import Dict, Union

from logging_config import get_logger
from .errors import IoError
from .models import WriteOutcome

logger = get_logger(__name__)


def write_atomic(path: Path, data: bytes) -> None:
    """
    Write data to path through a temp file in the same directory and os.replace().

    A failed write never leaves a partial file at path.

    Raises:
        IoError: Directory creation, write or rename failed
    """
    # Unique temp name so concurrent writers never share a temp file
    temp_path = path.parent / f".{path.name}.{uuid.uuid4().hex}.tmp"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "wb") as f:
            f.write(data)
        os.replace(temp_path, path)
    except OSError as e:
        try:
            temp_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as cleanup_error:
            logger.debug(f"Could not remove temp file {temp_path}: {cleanup_error}")
        raise IoError(path, e) from e


def write_file(path: Path, content: Union[bytes, str], overwrite: bool) -> WriteOutcome:
    """Blocking write. Existing files are left alone unless overwrite is set."""
    if path.exists() and not overwrite:
        return WriteOutcome.SKIPPED
    data = content.encode("utf-8") if isinstance(content, str) else content
    write_atomic(path, data)
    return WriteOutcome.WRITTEN


class FileWriter:
    """
    Async front end for write_file().

    Writes to the same path are serialized with one asyncio.Lock per path, so
    two documents that reference the same font never race on the file.
    """

    def __init__(self, overwrite: bool = False):
        self.overwrite = overwrite
        self._locks: Dict[Path, asyncio.Lock] = {}

    def _lock_for(self, path: Path) -> asyncio.Lock:
        key = Path(os.path.abspath(path))
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def write(self, path: Union[str, Path], content: Union[bytes, str]) -> WriteOutcome:
        path = Path(path)
        loop = asyncio.get_running_loop()
        async with self._lock_for(path):
            outcome = await loop.run_in_executor(None, write_file, path, content, self.overwrite)
        if outcome is WriteOutcome.SKIPPED:
            logger.debug(f"Skipped existing file {path}")
        else:
            logger.debug(f"Wrote {path}")
        return outcome

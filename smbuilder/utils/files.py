"""Output sink for generated files.

Each file is written to a temporary sibling and renamed over the target, so
a single file is never left half-written. There is no transaction across
the set: files written before a failure stay on disk.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Generator

from smbuilder.utils.logging import get_logger
from smbuilder.utils.result import Err, Ok, Result, WriteError

logger = get_logger("utils.files")


@contextmanager
def atomic_write(path: Path) -> Generator[BinaryIO, None, None]:
    """
    Context manager for atomic binary file writes.

    Writes to a temporary file first, then atomically renames to the target
    path. If any error occurs, the temp file is cleaned up and the original
    is untouched. Errors propagate to the caller.

    Args:
        path: Target file path

    Yields:
        Binary file handle for writing
    """
    path = Path(path)

    # Create temp file in same directory for atomic rename
    fd, temp_name = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    temp_path = Path(temp_name)
    success = False

    try:
        with os.fdopen(fd, "wb") as f:
            yield f

        temp_path.replace(path)
        success = True

    finally:
        if not success and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass


@dataclass(frozen=True)
class OutputFile:
    """A file to write. Contains the name of the file and its content."""

    name: str
    content: str


class OutputFiles:
    """
    A collection of files destined for one directory.

    Files are written in the order they were added and overwrite whatever
    is already on disk.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize the collection.

        Args:
            path: Destination directory, created on write if absent
        """
        self.path = Path(path)
        self.files: list[OutputFile] = []

    def add_file(self, name: str, content: str) -> None:
        """Add a file to the collection."""
        self.files.append(OutputFile(name=name, content=content))

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.files]

    def write(self) -> Result[str, WriteError]:
        """
        Write every file to the destination directory.

        Content is encoded as UTF-8 with no newline translation, so reading
        a file back yields exactly what was added.

        Returns:
            Ok with a confirmation message, or Err for the first I/O failure
        """
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("output_dir_failed", path=str(self.path), error=str(e))
            return Err(WriteError(
                path=str(self.path),
                message="cannot create output directory",
                cause=e,
            ))

        for output_file in self.files:
            target = self.path / output_file.name
            try:
                with atomic_write(target) as f:
                    f.write(output_file.content.encode("utf-8"))
            except OSError as e:
                logger.error("file_write_failed", path=str(target), error=str(e))
                return Err(WriteError(path=str(target), message="write failed", cause=e))

            logger.debug("file_written", path=str(target), size=len(output_file.content))

        logger.info("files_written", path=str(self.path), files=self.names)
        return Ok(f"The files have been written to {self.path}.")

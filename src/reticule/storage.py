"""Filesystem access behind a small, swappable interface.

The config repository never touches :mod:`os` directly. It is handed a
:class:`Storage` and uses three operations keyed by path:

* :meth:`Storage.open_read` -- open an existing file for reading.
* :meth:`Storage.open_write` -- open a file for a full rewrite. The
  returned handle is a context manager: new content becomes visible only
  when the ``with`` block exits cleanly, and is discarded otherwise.
* :meth:`Storage.makedirs` -- create a directory and its parents.

:class:`FileStorage` is the real implementation; writes go to a temp file
in the same directory with ``0o600`` permissions and are renamed over the
target with :func:`os.replace`, so a crash leaves either the old or the
new content. :class:`MemoryStorage` keeps everything in a dict and is used
by the test suite.

Errors are plain :class:`OSError` subclasses (:class:`FileNotFoundError`
for missing files); translating them into :mod:`reticule.exceptions` is
the repository's job.
"""

from __future__ import annotations

import errno
import io
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path, PurePath
from types import TracebackType
from typing import IO, Optional


class WriteHandle(ABC):
    """A writable handle that commits on clean exit and discards on error."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Buffer *data* for the pending rewrite."""

    @abstractmethod
    def commit(self) -> None:
        """Make the buffered content the file's content."""

    @abstractmethod
    def discard(self) -> None:
        """Drop the buffered content, leaving the file as it was."""

    def __enter__(self) -> WriteHandle:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            # A failing commit is the first error on this path, so it propagates.
            self.commit()
        else:
            # The body already failed; that error wins over any cleanup error.
            self.discard()


class Storage(ABC):
    """Abstract file access used by :class:`~reticule.config.ConfigRepository`."""

    @abstractmethod
    def open_read(self, path: PurePath) -> IO[bytes]:
        """Open *path* for reading.

        Raises:
            FileNotFoundError: If *path* does not exist.
            OSError: On any other failure.
        """

    @abstractmethod
    def open_write(self, path: PurePath, *, create: bool = False) -> WriteHandle:
        """Open *path* for a full rewrite.

        Args:
            path: Target file.
            create: Allow the file to be created. When ``False`` the file
                must already exist.

        Raises:
            FileNotFoundError: If *path* is missing and *create* is false,
                or its parent directory is missing.
        """

    @abstractmethod
    def makedirs(self, path: PurePath) -> None:
        """Create directory *path* and any missing parents. Existing directories are fine."""


def _missing(path: PurePath) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))


# --- Real filesystem ---


class _AtomicFile(WriteHandle):
    """Temp-file-then-rename writer for :class:`FileStorage`."""

    def __init__(self, path: Path, mode: int) -> None:
        self._path = path
        self._fd = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        self._tmp_path: Optional[str] = self._fd.name
        try:
            # Set restrictive permissions before writing content
            os.chmod(self._tmp_path, mode)
        except BaseException:
            self.discard()
            raise

    def write(self, data: bytes) -> int:
        return self._fd.write(data)

    def commit(self) -> None:
        try:
            self._fd.flush()
            os.fsync(self._fd.fileno())
            self._fd.close()
            os.replace(self._tmp_path, self._path)
            self._tmp_path = None
        except BaseException:
            self.discard()
            raise

    def discard(self) -> None:
        if not self._fd.closed:
            try:
                self._fd.close()
            except OSError:
                pass
        if self._tmp_path is not None:
            try:
                os.unlink(self._tmp_path)
            except OSError:
                pass
            self._tmp_path = None


class FileStorage(Storage):
    """:class:`Storage` backed by the local filesystem.

    Args:
        file_mode: Permission bits for files written through
            :meth:`open_write`. Defaults to ``0o600`` since the config
            holds API secrets.
    """

    def __init__(self, file_mode: int = 0o600) -> None:
        self._file_mode = file_mode

    def open_read(self, path: PurePath) -> IO[bytes]:
        return open(path, "rb")

    def open_write(self, path: PurePath, *, create: bool = False) -> WriteHandle:
        target = Path(path)
        if not create and not target.is_file():
            raise _missing(target)
        if not target.parent.is_dir():
            raise _missing(target.parent)
        return _AtomicFile(target, self._file_mode)

    def makedirs(self, path: PurePath) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)


# --- In memory ---


class _MemoryFile(WriteHandle):
    def __init__(self, storage: MemoryStorage, path: PurePath) -> None:
        self._storage = storage
        self._path = path
        self._buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        return self._buffer.write(data)

    def commit(self) -> None:
        self._storage.files[self._path] = self._buffer.getvalue()

    def discard(self) -> None:
        self._buffer = io.BytesIO()


class MemoryStorage(Storage):
    """:class:`Storage` that keeps files and directories in memory.

    Behaves like :class:`FileStorage` with respect to missing files and
    missing parent directories, so code exercised against it behaves the
    same on disk.

    Args:
        files: Initial file contents keyed by path. Parent directories of
            the given files are created implicitly.
    """

    def __init__(self, files: Optional[dict[PurePath, bytes]] = None) -> None:
        self.files: dict[PurePath, bytes] = {}
        self.dirs: set[PurePath] = set()
        for path, data in (files or {}).items():
            path = PurePath(path)
            self.makedirs(path.parent)
            self.files[path] = data

    def open_read(self, path: PurePath) -> IO[bytes]:
        path = PurePath(path)
        if path not in self.files:
            raise _missing(path)
        return io.BytesIO(self.files[path])

    def open_write(self, path: PurePath, *, create: bool = False) -> WriteHandle:
        path = PurePath(path)
        if not create and path not in self.files:
            raise _missing(path)
        if path.parent not in self.dirs:
            raise _missing(path.parent)
        return _MemoryFile(self, path)

    def makedirs(self, path: PurePath) -> None:
        path = PurePath(path)
        self.dirs.add(path)
        self.dirs.update(path.parents)

"""Config file location and the load/save repository for the config set.

Every profile lives in one YAML file at ``~/.reticule/reticule``
(:func:`config_path`). :class:`ConfigRepository` reads that file into a
:class:`~reticule.models.ConfigSet` and writes a whole config set back.
Nothing is ever patched in place: callers load everything, mutate in
memory and save everything.

Filesystem access and encoding are injected (:class:`~reticule.storage.Storage`
and :class:`~reticule.codec.Codec`) so the same repository runs against
the real disk or an in-memory store.

Error translation:

* missing file on load -- :class:`~reticule.exceptions.NotFoundError`
* undecodable content -- :class:`~reticule.exceptions.FormatError`
* any other filesystem or encode failure -- :class:`~reticule.exceptions.IOError_`
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath
from typing import Optional

from reticule.codec import Codec, YamlCodec
from reticule.exceptions import IOError_, NotFoundError
from reticule.models import ConfigSet
from reticule.storage import FileStorage, Storage

logger = logging.getLogger(__name__)

_APP_NAME = "reticule"


# --- Path resolution ---


def get_config_dir() -> Path:
    """Return ``~/.reticule`` without creating it.

    Raises:
        IOError_: If the home directory cannot be determined.
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise IOError_("no user home directory defined") from exc
    return home / f".{_APP_NAME}"


def config_path() -> Path:
    """Return the single config file path, ``~/.reticule/reticule``."""
    return get_config_dir() / _APP_NAME


# --- Repository ---


class ConfigRepository:
    """Loads and persists the config set stored at one path.

    Args:
        path: Location of the config file. Defaults to :func:`config_path`.
        storage: File access layer. Defaults to :class:`FileStorage`.
        codec: Encoder/decoder. Defaults to :class:`YamlCodec`.
    """

    def __init__(
        self,
        path: Optional[PurePath] = None,
        storage: Optional[Storage] = None,
        codec: Optional[Codec] = None,
    ) -> None:
        self._path = path if path is not None else config_path()
        self._storage = storage if storage is not None else FileStorage()
        self._codec = codec if codec is not None else YamlCodec()

    @property
    def path(self) -> PurePath:
        """The config file this repository reads and writes."""
        return self._path

    def ensure_parent(self) -> None:
        """Create the config file's parent directory tree.

        Raises:
            IOError_: If the directory cannot be created.
        """
        try:
            self._storage.makedirs(self._path.parent)
        except OSError as exc:
            raise IOError_(f"Cannot create config directory {self._path.parent}: {exc}") from exc

    def load(self) -> ConfigSet:
        """Read and decode the config file.

        Returns:
            A freshly decoded :class:`ConfigSet` owned by the caller.

        Raises:
            NotFoundError: If the file does not exist.
            IOError_: If the file exists but cannot be read.
            FormatError: If the content cannot be decoded.
        """
        try:
            with self._storage.open_read(self._path) as handle:
                data = handle.read()
        except FileNotFoundError as exc:
            raise NotFoundError(
                f"config file {str(self._path)!r} does not exist, create a new config "
                "with `config create reticule --name NAME`"
            ) from exc
        except OSError as exc:
            raise IOError_(f"Cannot read config file {self._path}: {exc}") from exc

        logger.debug("Read %d bytes from %s", len(data), self._path)
        return self._codec.decode(data)

    def save(self, config_set: ConfigSet, *, create: bool = False) -> None:
        """Encode *config_set* and replace the file's content with it.

        The whole set is encoded before the file is opened, so an encode
        failure leaves the file untouched. The new content only replaces
        the old one once it has been written completely.

        Args:
            config_set: The full config set to persist.
            create: Allow the file to be created. Without it the file must
                already exist (it is established by the first ``create``).

        Raises:
            IOError_: If encoding, opening, writing or committing fails.
        """
        try:
            data = self._codec.encode(config_set)
        except Exception as exc:
            raise IOError_(f"Cannot encode config: {exc}") from exc

        try:
            with self._storage.open_write(self._path, create=create) as handle:
                handle.write(data)
        except FileNotFoundError as exc:
            raise IOError_(
                f"Cannot write config file {self._path}: {exc.strerror or exc}"
            ) from exc
        except OSError as exc:
            raise IOError_(f"Cannot write config file {self._path}: {exc}") from exc

        logger.debug(
            "Wrote %d profile(s) to %s (current=%r)",
            len(config_set.profiles),
            self._path,
            config_set.current,
        )

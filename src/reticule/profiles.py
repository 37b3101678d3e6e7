"""Create, update and delete named profiles.

Each operation runs one load, applies one change in memory and saves the
whole config set back through a :class:`~reticule.config.ConfigRepository`.
Nothing is written when an operation fails.

Current-profile rules:

* A profile created while the file has no ``Configs`` mapping (new file,
  empty file, or a null mapping) becomes current, with or without ``use``.
  An empty mapping left by deleting every profile does not count, so a
  dangling ``current`` survives the next create.
* ``use`` makes the created or updated profile current.
* Deleting the current profile leaves ``current`` pointing at the removed
  name; it is neither cleared nor moved to another profile.
"""

from __future__ import annotations

import logging
from typing import Optional

from reticule.config import ConfigRepository
from reticule.exceptions import ConflictError, InvalidUsageError, NotFoundError
from reticule.models import ConfigSet, Profile, ProfilePatch

logger = logging.getLogger(__name__)


def _require_name(name: str, what: str = "name") -> None:
    if not name:
        raise InvalidUsageError(f"profile {what} must not be empty")


def create_profile(
    repository: ConfigRepository,
    name: str,
    profile: Profile,
    *,
    use: bool = False,
) -> ConfigSet:
    """Add a new profile, creating the config file on first use.

    Args:
        repository: Where the config set lives.
        name: Name of the new profile.
        profile: Fully resolved settings; CLI defaults are applied before
            this point.
        use: Make the new profile current.

    Returns:
        The config set as persisted.

    Raises:
        ConflictError: If a profile called *name* already exists. The file
            is left unchanged.
    """
    _require_name(name)

    creating = False
    try:
        config_set = repository.load()
    except NotFoundError:
        repository.ensure_parent()
        logger.info("creating config %r", str(repository.path))
        config_set = ConfigSet()
        creating = True
    else:
        if config_set.has_profile(name):
            raise ConflictError(
                f"reticule config {name!r} already exists, use "
                "`config update reticule` to modify an existing config"
            )

    if not config_set.has_profile_mapping:
        config_set.current = name
    if use:
        config_set.current = name

    config_set.profiles[name] = profile.model_copy(deep=True)
    repository.save(config_set, create=creating)
    logger.debug("Created profile %r; current profile is %r", name, config_set.current)
    return config_set


def update_profile(
    repository: ConfigRepository,
    name: str,
    patch: ProfilePatch,
    *,
    rename: Optional[str] = None,
    use: bool = False,
) -> ConfigSet:
    """Apply *patch* to an existing profile, optionally renaming it.

    Only the fields present in *patch* change. When *rename* is given the
    profile is moved to the new key with its values carried over; a
    profile already stored under that key is replaced without warning.
    ``current`` is not followed across a rename unless *use* is set.

    Returns:
        The config set as persisted.

    Raises:
        NotFoundError: If the config file does not exist.
        ConflictError: If no profile called *name* exists.
    """
    _require_name(name)
    if rename is not None:
        _require_name(rename, "rename")

    config_set = repository.load()
    profile = config_set.profiles.get(name)
    if profile is None:
        raise ConflictError(
            f"reticule config {name!r} does not exist, use "
            "`config create reticule` to create a new config"
        )

    applied = patch.apply_to(profile)
    if applied:
        logger.debug("Updating %s on profile %r", ", ".join(applied), name)

    target = name
    if rename:
        if rename != name and config_set.has_profile(rename):
            logger.debug("Rename replaces existing profile %r", rename)
        del config_set.profiles[name]
        target = rename

    if use:
        config_set.current = target

    config_set.profiles[target] = profile
    repository.save(config_set)
    return config_set


def delete_profile(repository: ConfigRepository, name: str) -> ConfigSet:
    """Remove the profile called *name*; removing an absent name is a no-op.

    The file is rewritten either way. ``current`` is left as it was, even
    when it named the deleted profile.

    Returns:
        The config set as persisted.

    Raises:
        NotFoundError: If the config file does not exist.
    """
    config_set = repository.load()
    if config_set.profiles.pop(name, None) is None:
        logger.debug("Profile %r not found; nothing to delete", name)
    repository.save(config_set)
    return config_set

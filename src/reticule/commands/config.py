"""Config commands -- create, update, delete and list connection profiles.

Provides the ``reticule config`` sub-command group. Every mutating command
takes a profile *target* sub-command (currently only ``reticule``, alias
``r``) naming which kind of profile to manage::

    reticule config create reticule --name prod --key ... --use
    reticule config update reticule --name prod --rename live
    reticule config delete reticule --name live
    reticule config list

All profiles live in ``~/.reticule/reticule``. Defaults for omitted create
options are resolved here, before :mod:`reticule.profiles` is called.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional
from urllib.parse import urlparse

import typer

from reticule.exceptions import ReticuleError
from reticule.output import error, print_table, success, suggest, warning

if TYPE_CHECKING:
    from reticule.config import ConfigRepository

DEFAULT_BASE_URL = "https://api-public.sandbox.pro.coinbase.com"
DEFAULT_FEED_URL = "wss://ws-feed-public.sandbox.pro.coinbase.com"
DEFAULT_SERVER_PORT = 80
DEFAULT_BIND_ADDRESS = "127.0.0.1"
DEFAULT_SERVER_AUTH = "default"

config_app = typer.Typer(no_args_is_help=True)
create_app = typer.Typer(no_args_is_help=True)
delete_app = typer.Typer(no_args_is_help=True)
update_app = typer.Typer(no_args_is_help=True)

config_app.add_typer(create_app, name="create", help="Create a new config.")
config_app.add_typer(delete_app, name="delete", help="Delete a config.")
config_app.add_typer(update_app, name="update", help="Update an existing config.")


@create_app.callback()
def _create_callback() -> None:
    """Create a new config."""


@delete_app.callback()
def _delete_callback() -> None:
    """Delete a config."""


@update_app.callback()
def _update_callback() -> None:
    """Update an existing config."""


def _validate_url(value: Optional[str]) -> Optional[str]:
    """Reject values that do not look like an absolute URL."""
    if value is None:
        return value
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise typer.BadParameter(f"{value!r} is not an absolute URL (scheme://host)")
    return value


def _register(app: typer.Typer, names: list[str], func: Callable[..., None]) -> None:
    """Register *func* under its primary name and hidden aliases."""
    primary, *aliases = names
    app.command(primary)(func)
    for alias in aliases:
        app.command(alias, hidden=True)(func)


def _repository() -> ConfigRepository:
    from reticule.config import ConfigRepository

    return ConfigRepository()


def _fail(exc: ReticuleError) -> typer.Exit:
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def create_reticule(
    name: str = typer.Option(..., "--name", "-n", help="Name of config."),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL,
        "--base-url",
        "-b",
        callback=_validate_url,
        help="URL of the exchange API that provided the key.",
    ),
    feed_url: str = typer.Option(
        DEFAULT_FEED_URL,
        "--feed-url",
        "-f",
        callback=_validate_url,
        help="URL of the websocket feed.",
    ),
    key: str = typer.Option("", "--key", "-k", help="Exchange-provided API key."),
    passphrase: str = typer.Option("", "--passphrase", "-p", help="Exchange API passphrase."),
    secret: str = typer.Option("", "--secret", "-s", help="Exchange-provided API secret."),
    use: bool = typer.Option(False, "--use", "-u", help="Set as config to use."),
    port: int = typer.Option(
        DEFAULT_SERVER_PORT, "--port", "-t", min=0, max=65535, help="Port to use in server mode."
    ),
    bind_address: str = typer.Option(
        DEFAULT_BIND_ADDRESS, "--bind-address", "-l", help="IP address to use in server mode."
    ),
    server_auth: str = typer.Option(
        DEFAULT_SERVER_AUTH, "--server-auth", "-a", help="Pre-shared secret for auth in server mode."
    ),
) -> None:
    """Create a new reticule config.

    The first config ever created becomes the current one. Creating a
    name that already exists fails; use ``config update reticule``
    instead.

    Raises:
        typer.Exit: With code 8 if the name exists, or the error's exit
            code for filesystem and format failures.

    Example::

        reticule config create reticule --name sandbox --key K --passphrase P --secret S
        reticule config create r -n prod -b https://api.pro.coinbase.com --use
    """
    from reticule.models import Credentials, Profile
    from reticule.profiles import create_profile

    profile = Profile(
        base_url=base_url,
        feed_url=feed_url,
        auth=Credentials(key=key, passphrase=passphrase, secret=secret),
        server_ip=bind_address,
        server_port=port,
        server_secret=server_auth,
    )
    try:
        config_set = create_profile(_repository(), name, profile, use=use)
    except ReticuleError as exc:
        raise _fail(exc) from None

    success(f"Created config {name!r}")
    if config_set.current == name:
        success(f"Using config {name!r}")


def delete_reticule(
    name: str = typer.Option(..., "--name", "-n", help="Name of config."),
) -> None:
    """Delete an existing reticule config.

    Deleting a name that does not exist succeeds without changes. When
    the deleted config was the current one, the current pointer is left
    as it is and a warning is printed.

    Example::

        reticule config delete reticule --name sandbox
    """
    from reticule.profiles import delete_profile

    try:
        config_set = delete_profile(_repository(), name)
    except ReticuleError as exc:
        raise _fail(exc) from None

    success(f"Deleted config {name!r}")
    if config_set.current_is_dangling:
        warning(f"current config {config_set.current!r} no longer exists")
        suggest("Select another with `config update reticule --name NAME --use`")


def update_reticule(
    name: str = typer.Option(..., "--name", "-n", help="Name of config."),
    rename: Optional[str] = typer.Option(None, "--rename", "-r", help="New name for config."),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        callback=_validate_url,
        help="URL of the exchange API that provided the key.",
    ),
    feed_url: Optional[str] = typer.Option(
        None, "--feed-url", "-f", callback=_validate_url, help="URL of the websocket feed."
    ),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Exchange-provided API key."),
    passphrase: Optional[str] = typer.Option(
        None, "--passphrase", "-p", help="Exchange API passphrase."
    ),
    secret: Optional[str] = typer.Option(
        None, "--secret", "-s", help="Exchange-provided API secret."
    ),
    use: bool = typer.Option(False, "--use", "-u", help="Set as config to use."),
    port: Optional[int] = typer.Option(
        None, "--port", "-t", min=0, max=65535, help="Port to use in server mode."
    ),
    bind_address: Optional[str] = typer.Option(
        None, "--bind-address", "-l", help="IP address to use in server mode."
    ),
    server_auth: Optional[str] = typer.Option(
        None, "--server-auth", "-a", help="Pre-shared secret for auth in server mode."
    ),
) -> None:
    """Update an existing reticule config.

    Only the options given on the command line change; everything else
    keeps its stored value. ``--rename`` moves the config to a new name,
    replacing any config already stored under that name.

    Example::

        reticule config update reticule --name sandbox --key NEWKEY
        reticule config update r -n sandbox --rename staging --use
    """
    from reticule.models import ProfilePatch
    from reticule.profiles import update_profile

    patch = ProfilePatch(
        base_url=base_url,
        feed_url=feed_url,
        key=key,
        passphrase=passphrase,
        secret=secret,
        server_ip=bind_address,
        server_port=port,
        server_secret=server_auth,
    )
    try:
        update_profile(_repository(), name, patch, rename=rename, use=use)
    except ReticuleError as exc:
        raise _fail(exc) from None

    target = rename or name
    success(f"Updated config {target!r}")


@config_app.command("list")
def config_list() -> None:
    """List stored configs.

    Prints one row per config with its endpoints and server-mode address.
    The current config is marked with ``*``. Credentials are never shown.

    Example::

        reticule config list
        reticule --json config list
    """
    from reticule.config import ConfigRepository

    try:
        config_set = ConfigRepository().load()
    except ReticuleError as exc:
        raise _fail(exc) from None

    rows = [
        [
            "*" if name == config_set.current else "",
            name,
            profile.base_url,
            profile.feed_url,
            f"{profile.server_ip}:{profile.server_port}",
        ]
        for name, profile in sorted(config_set.profiles.items())
    ]
    print_table(["current", "name", "base url", "feed url", "server"], rows, title="Configs")
    if config_set.current_is_dangling:
        warning(f"current config {config_set.current!r} no longer exists")


_register(create_app, ["reticule", "r"], create_reticule)
_register(delete_app, ["reticule", "r"], delete_reticule)
_register(update_app, ["reticule", "r", "cb"], update_reticule)

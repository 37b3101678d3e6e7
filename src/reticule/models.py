"""Pydantic models for the persisted config set.

This is the single source of truth for data shapes in the project. The
on-disk document is a YAML mapping shaped like::

    Current: alice
    Configs:
      alice:
        BaseURL: https://api-public.sandbox.pro.coinbase.com
        FeedURL: wss://ws-feed-public.sandbox.pro.coinbase.com
        Auth:
          Key: ...
          Passphrase: ...
          Secret: ...
        ServerIP: 127.0.0.1
        ServerPort: 80
        ServerSecret: default

Field names in Python are snake_case; the capitalised keys above are the
serialisation aliases. Decoding also accepts the lower-case spellings
(``current``, ``configs``, ``baseurl``, ...) written by older releases of
the tool.

Models:
    :class:`Credentials`, :class:`Profile`, :class:`ConfigSet` -- stored state.
    :class:`ProfilePatch` -- a sparse set of field changes for ``update``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


def _alias(canonical: str) -> dict[str, Any]:
    """Field kwargs that write *canonical* and read it or its lower-case form."""
    return {
        "validation_alias": AliasChoices(canonical, canonical.lower()),
        "serialization_alias": canonical,
    }


_PROFILE_KEYS = ("profiles", "Configs", "configs")


def _scalar_text(value: Any) -> Any:  # noqa: ANN401
    """Read a hand-edited YAML scalar as the string the user typed.

    A null (``Key:`` with no value) becomes ``""``. Unquoted numbers,
    booleans and dates such as ``Passphrase: 123456`` or ``Current: 2024``
    are turned back into text. Anything else is left for Pydantic to check.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class Credentials(BaseModel):
    """API credentials issued by the exchange. Owned by exactly one :class:`Profile`."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    key: str = Field(default="", **_alias("Key"))
    passphrase: str = Field(default="", **_alias("Passphrase"))
    secret: str = Field(default="", **_alias("Secret"))

    @field_validator("key", "passphrase", "secret", mode="before")
    @classmethod
    def null_strings(cls, value: Any) -> Any:  # noqa: ANN401
        return _scalar_text(value)


class Profile(BaseModel):
    """One named bundle of connection and credential settings.

    ``server_ip``, ``server_port`` and ``server_secret`` configure the local
    listener used in server mode; callers of that listener authenticate
    with ``server_secret``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_url: str = Field(default="", description="REST endpoint base", **_alias("BaseURL"))
    feed_url: str = Field(default="", description="Websocket feed base", **_alias("FeedURL"))
    auth: Credentials = Field(default_factory=Credentials, **_alias("Auth"))
    server_ip: str = Field(default="", description="Bind address in server mode", **_alias("ServerIP"))
    server_port: int = Field(default=0, description="Bind port in server mode", **_alias("ServerPort"))
    server_secret: str = Field(
        default="", description="Pre-shared secret for server mode", **_alias("ServerSecret")
    )

    @field_validator("base_url", "feed_url", "server_ip", "server_secret", mode="before")
    @classmethod
    def null_strings(cls, value: Any) -> Any:  # noqa: ANN401
        return _scalar_text(value)

    @field_validator("auth", mode="before")
    @classmethod
    def null_auth(cls, value: Any) -> Any:  # noqa: ANN401
        return {} if value is None else value

    @field_validator("server_port", mode="before")
    @classmethod
    def null_port(cls, value: Any) -> Any:  # noqa: ANN401
        return 0 if value is None else value


class ConfigSet(BaseModel):
    """Every stored profile plus the name of the current one.

    ``current`` is empty until the first profile is created. It is not
    guaranteed to name an existing profile: deleting the current profile
    leaves it pointing at the removed name.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current: str = Field(default="", **_alias("Current"))
    profiles: dict[str, Profile] = Field(default_factory=dict, **_alias("Configs"))

    @model_validator(mode="before")
    @classmethod
    def drop_null_profiles(cls, data: Any) -> Any:  # noqa: ANN401
        # ``Configs:`` with no value reads the same as no mapping at all.
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if not (key in _PROFILE_KEYS and value is None)
            }
        return data

    @field_validator("current", mode="before")
    @classmethod
    def null_current(cls, value: Any) -> Any:  # noqa: ANN401
        return _scalar_text(value)

    @field_validator("profiles", mode="before")
    @classmethod
    def stringify_names(cls, value: Any) -> Any:  # noqa: ANN401
        # Hand-edited YAML may leave names unquoted, e.g. ``2024:``.
        if isinstance(value, dict):
            return {str(name): profile for name, profile in value.items()}
        return value

    @property
    def has_profile_mapping(self) -> bool:
        """False for a new or empty file, or one whose ``Configs`` key is null.

        An empty mapping left behind by deleting every profile still counts.
        """
        return "profiles" in self.model_fields_set

    def to_document(self) -> dict[str, Any]:
        """Return the plain mapping written to disk, keyed by the canonical aliases."""
        return self.model_dump(mode="json", by_alias=True)

    def has_profile(self, name: str) -> bool:
        return name in self.profiles

    @property
    def current_is_dangling(self) -> bool:
        """True when ``current`` is set but names no stored profile."""
        return bool(self.current) and self.current not in self.profiles


class ProfilePatch(BaseModel):
    """Sparse changes applied by ``config update``.

    Every field defaults to ``None`` meaning "leave unchanged". A field that
    is present is copied verbatim, so an explicit empty string clears the
    stored value.
    """

    base_url: Optional[str] = None
    feed_url: Optional[str] = None
    key: Optional[str] = None
    passphrase: Optional[str] = None
    secret: Optional[str] = None
    server_ip: Optional[str] = None
    server_port: Optional[int] = None
    server_secret: Optional[str] = None

    def apply_to(self, profile: Profile) -> list[str]:
        """Copy every present field into *profile* in place.

        Returns:
            The names of the fields that were applied, in declaration order.
        """
        applied: list[str] = []
        for field_name, value in self.model_dump(exclude_none=True).items():
            if field_name in ("key", "passphrase", "secret"):
                setattr(profile.auth, field_name, value)
            else:
                setattr(profile, field_name, value)
            applied.append(field_name)
        return applied

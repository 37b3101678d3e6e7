"""Encode and decode a :class:`~reticule.models.ConfigSet` as YAML.

The repository only depends on the :class:`Codec` interface, so another
text format can be dropped in without touching the mutation logic.
:class:`YamlCodec` is the one the CLI uses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import yaml
from pydantic import ValidationError

from reticule.exceptions import FormatError
from reticule.models import ConfigSet


class Codec(ABC):
    """Turns a :class:`ConfigSet` into bytes and back."""

    @abstractmethod
    def encode(self, config_set: ConfigSet) -> bytes:
        """Serialise the whole config set."""

    @abstractmethod
    def decode(self, data: bytes) -> ConfigSet:
        """Parse *data* into a config set.

        Raises:
            FormatError: If *data* is not a valid encoded config set.
        """


class YamlCodec(Codec):
    """Block-style YAML using PyYAML's safe loader and dumper.

    An empty document decodes to an empty :class:`ConfigSet`, which is how
    a freshly created (still empty) config file reads back.
    """

    def encode(self, config_set: ConfigSet) -> bytes:
        text = yaml.safe_dump(
            config_set.to_document(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return text.encode("utf-8")

    def decode(self, data: bytes) -> ConfigSet:
        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as exc:
            raise FormatError(f"Config is not valid YAML: {exc}") from exc

        if document is None:
            return ConfigSet()
        if not isinstance(document, dict):
            raise FormatError(
                f"Config must be a mapping with 'Current' and 'Configs' keys, "
                f"got {type(document).__name__}"
            )
        try:
            return ConfigSet.model_validate(document)
        except ValidationError as exc:
            raise FormatError(f"Invalid config: {exc}") from exc

"""Configuration file formats and their codecs.

A `FormatRegistry` maps file extensions to `FileFormat` tags and each tag to a
`FormatCodec`. The registry order matters: it decides which extension is tried
first during a search and which format wins when two codecs claim the same
extension.
"""

import enum
import json
import logging
import tomllib
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w
import yaml

from .constants import APP_NAME
from .errors import DecodeError, EncodeError, UnsupportedFormat

logger = logging.getLogger(APP_NAME)


class FileFormat(enum.Enum):
    """The language of a configuration file."""

    TOML = "toml"
    JSON = "json"
    YAML = "yaml"
    RON = "ron"

    @property
    def extension(self) -> str:
        """str: The canonical file extension, without the leading dot."""
        return self.value

    @property
    def extensions(self) -> tuple[str, ...]:
        """tuple[str, ...]: Every recognized extension, canonical first."""
        if self is FileFormat.YAML:
            return ("yaml", "yml")
        return (self.value,)


@dataclass(frozen=True)
class FormatCodec:
    """A serializer/deserializer pair for one format.

    Attributes:
        dumps (Callable[[Any], bytes]): Encodes a plain value.
        loads (Callable[[bytes], Any]): Decodes file contents.
        errors (tuple[type[Exception], ...]): Exceptions the codec raises on
            bad input; they are re-raised as `EncodeError` / `DecodeError`.
    """

    dumps: Callable[[Any], bytes]
    loads: Callable[[bytes], Any]
    errors: tuple[type[Exception], ...] = (ValueError, TypeError)


def _toml_dumps(value: Any) -> bytes:
    if not isinstance(value, dict):
        raise TypeError(f"TOML documents must be tables, not {type(value).__name__}")
    return tomli_w.dumps(value).encode("utf-8")


def _toml_loads(data: bytes) -> Any:
    return tomllib.loads(data.decode("utf-8"))


def _json_dumps(value: Any) -> bytes:
    return json.dumps(value, indent=2).encode("utf-8")


def _json_loads(data: bytes) -> Any:
    return json.loads(data.decode("utf-8"))


def _yaml_dumps(value: Any) -> bytes:
    return yaml.safe_dump(value, sort_keys=False, allow_unicode=True).encode("utf-8")


def _yaml_loads(data: bytes) -> Any:
    return yaml.safe_load(data.decode("utf-8"))


TOML_CODEC = FormatCodec(
    _toml_dumps, _toml_loads, (tomllib.TOMLDecodeError, UnicodeDecodeError, TypeError)
)
JSON_CODEC = FormatCodec(_json_dumps, _json_loads, (ValueError, TypeError))
YAML_CODEC = FormatCodec(_yaml_dumps, _yaml_loads, (yaml.YAMLError, UnicodeDecodeError))


class FormatRegistry:
    """An ordered mapping of formats to codecs.

    Formats are kept in registration order. Extension lookups are
    case-insensitive, and the first registered format claiming an extension
    wins.
    """

    def __init__(
        self, codecs: Iterable[tuple[FileFormat, FormatCodec]] = ()
    ) -> None:
        self._codecs: dict[FileFormat, FormatCodec] = {}
        for file_format, codec in codecs:
            self.register(file_format, codec)

    def register(self, file_format: FileFormat, codec: FormatCodec) -> None:
        """Adds or replaces the codec for a format.

        Replacing a codec keeps the format at its original position.

        Args:
            file_format (FileFormat): The format tag.
            codec (FormatCodec): The codec used to read and write it.
        """
        self._codecs[file_format] = codec

    @property
    def formats(self) -> tuple[FileFormat, ...]:
        """tuple[FileFormat, ...]: Registered formats in registration order."""
        return tuple(self._codecs)

    def __contains__(self, file_format: object) -> bool:
        return file_format in self._codecs

    def require(self, file_format: FileFormat) -> FormatCodec:
        """Returns the codec for a format.

        Raises:
            UnsupportedFormat: If no codec is registered for `file_format`.
        """
        try:
            return self._codecs[file_format]
        except KeyError:
            raise UnsupportedFormat(file_format) from None

    def extension_for(self, file_format: FileFormat) -> str:
        """Returns the canonical extension of a registered format."""
        self.require(file_format)
        return file_format.extension

    def format_for_extension(self, extension: str) -> FileFormat | None:
        """Finds the registered format recognizing an extension.

        Args:
            extension (str): The extension, with or without its leading dot.

        Returns:
            FileFormat | None: The first registered match, or None.
        """
        wanted = extension.lower().lstrip(".")
        for file_format in self._codecs:
            if wanted in file_format.extensions:
                return file_format
        return None

    def format_for_path(self, path: Path) -> FileFormat | None:
        """Infers a format from the extension of `path`."""
        if not path.suffix:
            return None
        return self.format_for_extension(path.suffix)

    def search_extensions(
        self, first: FileFormat | None = None
    ) -> list[tuple[str, FileFormat]]:
        """Lists every (extension, format) pair in search order.

        Args:
            first (FileFormat | None): A format whose extensions go first.

        Returns:
            list[tuple[str, FileFormat]]: Extensions of `first`, then those of the
            remaining formats in registration order. Alternate extensions follow
            the canonical one of their format.
        """
        ordered = list(self._codecs)
        if first in self._codecs:
            ordered.remove(first)
            ordered.insert(0, first)

        pairs: list[tuple[str, FileFormat]] = []
        claimed: set[str] = set()
        for file_format in ordered:
            for ext in file_format.extensions:
                # An extension claimed by an earlier format is never reassigned.
                owner = self.format_for_extension(ext)
                if owner is not file_format or ext in claimed:
                    continue
                claimed.add(ext)
                pairs.append((ext, file_format))
        return pairs

    def serialize(self, file_format: FileFormat, value: Any) -> bytes:
        """Encodes a plain value.

        Raises:
            UnsupportedFormat: If the format is not registered.
            EncodeError: If the codec rejects the value.
        """
        codec = self.require(file_format)
        try:
            return codec.dumps(value)
        except codec.errors as e:
            raise EncodeError(file_format, e) from e

    def deserialize(self, file_format: FileFormat, data: bytes) -> Any:
        """Decodes file contents into a plain value.

        Raises:
            UnsupportedFormat: If the format is not registered.
            DecodeError: If the contents are malformed.
        """
        codec = self.require(file_format)
        try:
            return codec.loads(data)
        except codec.errors as e:
            raise DecodeError(file_format, e) from e


DEFAULT_REGISTRY = FormatRegistry(
    [
        (FileFormat.TOML, TOML_CODEC),
        (FileFormat.JSON, JSON_CODEC),
        (FileFormat.YAML, YAML_CODEC),
    ]
)
"""FormatRegistry: TOML, JSON and YAML, in that priority order."""

DEFAULT_FILE_FORMAT = FileFormat.TOML
"""FileFormat: The format used when a policy does not name one."""


def detect_file_format(
    stem: Path, registry: FormatRegistry = DEFAULT_REGISTRY
) -> tuple[Path, FileFormat] | None:
    """Checks which extension of a configuration file name exists on disk.

    Every recognized extension is tried in registry order
    (``toml``, ``json``, ``yaml``, ``yml`` with the default registry).

    Args:
        stem (Path): The file path without its extension, e.g. ``~/.config/app/app``.
        registry (FormatRegistry): The formats to try.

    Returns:
        tuple[Path, FileFormat] | None: The first existing file and its format.
    """
    for ext, file_format in registry.search_extensions():
        candidate = stem.with_name(f"{stem.name}.{ext}")
        if candidate.is_file():
            logger.debug(f"Detected {file_format.value} configuration at {candidate}")
            return candidate, file_format
    return None

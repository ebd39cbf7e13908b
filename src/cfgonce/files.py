"""Resolved configuration files and their read/write operations.

`RawConfigFile` is the outcome of a search and may not carry a path.
`ConfigFile` always does: it can only be obtained through `check()` or one of
the `fallback_*` methods, so its operations fail only on I/O or codec errors.
"""

import enum
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from .constants import APP_NAME
from .errors import (
    ConfigIOError,
    DecodeError,
    EncodeError,
    NoPathResolved,
    UnsupportedExtension,
)
from .formats import FileFormat
from .schema import SchemaMismatch, from_plain, to_plain

if TYPE_CHECKING:
    from .path import ConfigPathMetadata

logger = logging.getLogger(APP_NAME)

T = TypeVar("T")


class ResolutionStatus(enum.Enum):
    UNRESOLVED = "unresolved"
    FOUND = "found"
    NOT_FOUND = "not-found"


@dataclass(frozen=True)
class ResolutionState:
    """The outcome of a search.

    Attributes:
        status (ResolutionStatus): Whether a file was found.
        path (Path | None): The file, set exactly when `status` is FOUND.
        file_format (FileFormat): The file's format, or the policy default.
    """

    status: ResolutionStatus
    path: Path | None
    file_format: FileFormat

    @classmethod
    def found(cls, path: Path, file_format: FileFormat) -> "ResolutionState":
        return cls(ResolutionStatus.FOUND, path, file_format)

    @classmethod
    def not_found(cls, file_format: FileFormat) -> "ResolutionState":
        return cls(ResolutionStatus.NOT_FOUND, None, file_format)

    @classmethod
    def unresolved(cls, file_format: FileFormat) -> "ResolutionState":
        return cls(ResolutionStatus.UNRESOLVED, None, file_format)

    @property
    def is_found(self) -> bool:
        return self.status is ResolutionStatus.FOUND


class RawConfigFile:
    """A possibly missing configuration file.

    Keeping this around is not recommended: construct it from the
    `ConfigPathMetadata` where it is used.
    """

    def __init__(self, metadata: "ConfigPathMetadata", state: ResolutionState) -> None:
        self.metadata = metadata
        self.state = state

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.state!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawConfigFile):
            return NotImplemented
        return self.metadata == other.metadata and self.state == other.state

    @property
    def file_format(self) -> FileFormat:
        return self.state.file_format

    @property
    def unchecked_path(self) -> Path | None:
        """The resolved path, if any, without confirming its format."""
        return self.state.path

    def with_format(self, file_format: FileFormat) -> "RawConfigFile":
        """Returns a handle that uses `file_format` regardless of the file extension.

        The caller is responsible for any mismatch between the file contents
        and the forced format.
        """
        self.metadata.registry.require(file_format)
        return type(self)(self.metadata, replace(self.state, file_format=file_format))

    def check(self) -> "ConfigFile":
        """Returns the checked handle.

        Raises:
            NoPathResolved: If the search found nothing.
        """
        return ConfigFile(self.metadata, self.state)

    # --- Fallbacks ---

    def fallback_path(self, path: Path | str) -> "ConfigFile":
        """Uses `path` if no file was found.

        The format is inferred from the extension of `path`. A path without an
        extension uses the policy's default format.

        Raises:
            UnsupportedExtension: If `path` has an extension no codec claims.
        """
        if self.state.is_found:
            return self.check()
        path = Path(path)
        file_format = self.metadata.registry.format_for_path(path)
        if file_format is None:
            if path.suffix:
                raise UnsupportedExtension(path.suffix, path)
            file_format = self.metadata.default_format
        return ConfigFile(self.metadata, ResolutionState.found(path, file_format))


    def fallback_default(self) -> "ConfigFile":
        """Uses the default file in the local directory if no file was found.

        The default is ``<local dir>/<first config name>.<default extension>``,
        never dot-prefixed. Its existence is not checked. Calling this on a
        found handle returns it unchanged.
        """
        return self.fallback_default_local()

    def fallback_default_local(self) -> "ConfigFile":
        """Same as `fallback_default`."""
        if self.state.is_found:
            return self.check()
        return self._fallback_to(self.metadata.default_local_config_file())

    def fallback_default_sys(self) -> "ConfigFile":
        """Uses the default file in the system directory if no file was found."""
        if self.state.is_found:
            return self.check()
        return self._fallback_to(self.metadata.default_sys_config_file())

    def _fallback_to(self, path: Path) -> "ConfigFile":
        logger.debug(f"Falling back to {path}")
        state = ResolutionState.found(path, self.metadata.default_format)
        return ConfigFile(self.metadata, state)

    # --- I/O ---

    def _require_path(self) -> Path:
        if self.state.path is None or not self.state.is_found:
            raise NoPathResolved()
        return self.state.path

    def read(self, schema: type[T] | None = None) -> Any:
        """Reads and deserializes the configuration file.

        Args:
            schema (type | None): A dataclass (or other type) to build from the
                decoded data. Plain data is returned when omitted.

        Raises:
            NoPathResolved: If no file was resolved.
            ConfigIOError: If the file cannot be opened or read.
            DecodeError: If the contents are malformed or do not fit `schema`.
        """
        path = self._require_path()
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ConfigIOError(path, "read", e) from e

        registry = self.metadata.registry
        try:
            value = registry.deserialize(self.file_format, data)
        except DecodeError as e:
            raise e.with_path(path) from e.__cause__

        if schema is None:
            return value
        try:
            return from_plain(schema, value)
        except SchemaMismatch as e:
            raise DecodeError(self.file_format, e, path) from e

    def write(self, value: Any) -> None:
        """Serializes `value` and overwrites the configuration file.

        Parent directories are created as needed. The write is not atomic.

        Raises:
            NoPathResolved: If no file was resolved.
            EncodeError: If `value` cannot be represented in the file format.
            ConfigIOError: If the file or its directory cannot be written.
        """
        path = self._require_path()
        try:
            data = self.metadata.registry.serialize(self.file_format, to_plain(value))
        except EncodeError as e:
            raise e.with_path(path) from e.__cause__

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigIOError(path.parent, "create-directory", e) from e
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise ConfigIOError(path, "write", e) from e
        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def read_or_new(self, default: T) -> T:
        """Reads the configuration file, creating it from `default` if missing.

        Only a missing file is replaced: an existing but malformed file still
        raises `DecodeError`.
        """
        path = self._require_path()
        if path.exists():
            return self.read(type(default))
        logger.info(f"Creating default configuration at {path}")
        self.write(default)
        return default

    def read_or_default(self, schema: type[T] = dict) -> T:  # type: ignore[assignment]
        """Reads the configuration file, creating it from ``schema()`` if missing."""
        return self.read_or_new(schema())


class ConfigFile(RawConfigFile):
    """A configuration file whose location is known.

    Raises:
        NoPathResolved: On construction, if `state` is not FOUND.
    """

    def __init__(self, metadata: "ConfigPathMetadata", state: ResolutionState) -> None:
        if not state.is_found or state.path is None:
            raise NoPathResolved()
        super().__init__(metadata, state)

    @property
    def path(self) -> Path:
        return self._require_path()

    def check(self) -> "ConfigFile":
        return self

"""Exceptions raised by cfgonce.

cfgonce itself rarely fails: most errors originate in the operating system or
in one of the format codecs, and are re-raised here with the original
exception attached as ``__cause__``.
"""

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .formats import FileFormat


class ConfigError(Exception):
    """Base class for every error raised by cfgonce."""


class PlatformDirectoryUnavailable(ConfigError):
    """The platform configuration directory for a project could not be determined."""


class NoPathResolved(ConfigError):
    """An operation needed a resolved configuration path, but none was found.

    Consider calling `fallback_default()` or creating the configuration file
    before reading it.
    """

    def __init__(self, message: str = "No configuration file found.") -> None:
        super().__init__(message)


class InvalidPolicy(ConfigError, ValueError):
    """A search policy was declared that can never produce a candidate."""


class UnsupportedExtension(ConfigError, ValueError):
    """A file extension does not match any registered format."""

    def __init__(self, extension: str, path: Path | None = None) -> None:
        self.extension = extension
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"Unsupported configuration extension '{extension}'{where}")


class UnsupportedFormat(UnsupportedExtension):
    """A format tag has no codec in the registry in use."""

    def __init__(self, file_format: "FileFormat") -> None:
        self.file_format = file_format
        super().__init__(file_format.extension)
        self.args = (f"No codec registered for format '{file_format.value}'",)


class ConfigIOError(ConfigError):
    """Opening, reading or writing a configuration file failed.

    Attributes:
        path (Path): The file or directory involved.
        operation (str): One of ``open``, ``read``, ``write`` or ``create-directory``.
    """

    def __init__(self, path: Path, operation: str, error: OSError) -> None:
        self.path = path
        self.operation = operation
        self.error = error
        super().__init__(f"File system error ({operation}) at {path}: {error}")


class _CodecError(ConfigError):
    verb = ""

    def __init__(
        self,
        file_format: "FileFormat",
        error: Exception,
        path: Path | None = None,
    ) -> None:
        self.file_format = file_format
        self.path = path
        self.error = error
        where = f" in {path}" if path else ""
        super().__init__(
            f"Failed to {self.verb} {file_format.value} data{where}: {error}"
        )

    def with_path(self, path: Path) -> "_CodecError":
        """Returns a copy of this error that names the file involved."""
        clone = type(self)(self.file_format, self.error, path)
        clone.__cause__ = self.__cause__
        return clone


class DecodeError(_CodecError):
    """A configuration file is malformed or does not match the expected schema."""

    verb = "deserialize"


class EncodeError(_CodecError):
    """A value could not be serialized into the requested format."""

    verb = "serialize"

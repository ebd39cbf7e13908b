"""cfgonce: configure once, use anywhere.

This package lets an application declare where its configuration file lives
and in which format, then search, read and write it without repeating
platform-specific path logic.
"""

from .errors import (
    ConfigError,
    ConfigIOError,
    DecodeError,
    EncodeError,
    InvalidPolicy,
    NoPathResolved,
    PlatformDirectoryUnavailable,
    UnsupportedExtension,
    UnsupportedFormat,
)
from .files import ConfigFile, RawConfigFile, ResolutionState, ResolutionStatus
from .formats import (
    DEFAULT_FILE_FORMAT,
    DEFAULT_REGISTRY,
    FileFormat,
    FormatCodec,
    FormatRegistry,
    detect_file_format,
)
from .path import (
    Candidate,
    ConfigOption,
    ConfigPathMetadata,
    iter_candidates,
    search,
)
from .project import (
    ConfigType,
    ProjectPath,
    system_config_dir,
    system_dir,
    system_preference_dir,
)

__all__ = [
    "Candidate",
    "ConfigError",
    "ConfigFile",
    "ConfigIOError",
    "ConfigOption",
    "ConfigPathMetadata",
    "ConfigType",
    "DEFAULT_FILE_FORMAT",
    "DEFAULT_REGISTRY",
    "DecodeError",
    "EncodeError",
    "FileFormat",
    "FormatCodec",
    "FormatRegistry",
    "InvalidPolicy",
    "NoPathResolved",
    "PlatformDirectoryUnavailable",
    "ProjectPath",
    "RawConfigFile",
    "ResolutionState",
    "ResolutionStatus",
    "UnsupportedExtension",
    "UnsupportedFormat",
    "detect_file_format",
    "iter_candidates",
    "search",
    "system_config_dir",
    "system_dir",
    "system_preference_dir",
]

"""Search policies and the configuration file search.

A `ConfigPathMetadata` is declared once per application, usually as a module
level constant, and describes where its configuration files may live::

    APP_CONFIG = ConfigPathMetadata(
        project_path=ProjectPath("org", "my-organization", "my-app"),
        config_name=("my-app",),
        default_format=FileFormat.TOML,
    )

    settings = APP_CONFIG.read_or_default(Settings)

Candidates are checked in this order:

1. Local (working directory) then system directory, or the reverse when
   `ConfigOption.sys_override_local` is set.
2. For each directory: every config name, every extension (the default
   format's first, then the registry order) and, when dot prefixes are
   allowed, ``.name.ext`` before ``name.ext``.
3. `extra_folders`, in declaration order, expanded the same way.
4. `extra_files`, verbatim, each with the format of its own extension.
"""

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, TypeVar

from .constants import (
    APP_NAME,
    DEFAULT_ALLOW_DOT_PREFIX,
    DEFAULT_SYS_OVERRIDE_LOCAL,
    DOT_PREFIX,
    LOCAL_DIR_ENV,
)
from .errors import ConfigIOError, InvalidPolicy
from .files import ConfigFile, RawConfigFile, ResolutionState
from .formats import DEFAULT_FILE_FORMAT, DEFAULT_REGISTRY, FileFormat, FormatRegistry
from .project import ConfigType, ProjectPath, system_dir

logger = logging.getLogger(APP_NAME)

T = TypeVar("T")


def local_dir() -> Path:
    """Returns the directory searched as "local".

    This is the working directory unless `CFGONCE_CWD` is set.

    Raises:
        ConfigIOError: If the working directory no longer exists.
    """
    override = os.environ.get(LOCAL_DIR_ENV)
    if override:
        return Path(override)
    try:
        return Path.cwd()
    except OSError as e:
        raise ConfigIOError(Path("."), "open", e) from e


@dataclass(frozen=True)
class ConfigOption:
    """Extra options for the configuration file search.

    Attributes:
        allow_dot_prefix (bool): Also accept ``.<name>.<ext>`` files, which
            take precedence over ``<name>.<ext>`` in the same directory.
        sys_override_local (bool): Search the system directory before the
            local one.
        config_sys_type (ConfigType): Which system directory to use.
    """

    allow_dot_prefix: bool = DEFAULT_ALLOW_DOT_PREFIX
    sys_override_local: bool = DEFAULT_SYS_OVERRIDE_LOCAL
    config_sys_type: ConfigType = ConfigType.CONFIG

    def with_allow_dot_prefix(self, allow_dot_prefix: bool) -> "ConfigOption":
        return replace(self, allow_dot_prefix=allow_dot_prefix)

    def with_sys_override_local(self, sys_override_local: bool) -> "ConfigOption":
        return replace(self, sys_override_local=sys_override_local)

    def with_config_sys_type(self, config_sys_type: ConfigType) -> "ConfigOption":
        return replace(self, config_sys_type=config_sys_type)


ConfigOption.DEFAULT = ConfigOption()  # type: ignore[attr-defined]


@dataclass(frozen=True)
class Candidate:
    """A single (location, format) pair considered during a search."""

    path: Path
    file_format: FileFormat


@dataclass(frozen=True)
class ConfigPathMetadata:
    """How an application's configuration files are named, found and stored.

    Attributes:
        project_path (ProjectPath): The application identity.
        config_name (tuple[str, ...]): Base names of the configuration file,
            without extension. At least one is required unless `extra_files`
            is given.
        default_format (FileFormat): The format of newly created files.
        extra_files (tuple[Path, ...]): Explicit files, checked last.
        extra_folders (tuple[Path, ...]): Additional directories, checked after
            the system and local ones.
        config_option (ConfigOption): Search options.
        registry (FormatRegistry): The formats available to this policy.
    """

    project_path: ProjectPath
    config_name: Sequence[str] = ()
    default_format: FileFormat = DEFAULT_FILE_FORMAT
    extra_files: Sequence[Path | str] = ()
    extra_folders: Sequence[Path | str] = ()
    config_option: ConfigOption = field(default_factory=ConfigOption)
    registry: FormatRegistry = field(
        default=DEFAULT_REGISTRY, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        names = self.config_name
        if isinstance(names, str):
            names = (names,)
        object.__setattr__(self, "config_name", tuple(names))
        object.__setattr__(
            self, "extra_files", tuple(Path(p) for p in self.extra_files)
        )
        object.__setattr__(
            self, "extra_folders", tuple(Path(p) for p in self.extra_folders)
        )

        if not self.config_name and not self.extra_files:
            raise InvalidPolicy(
                "Configuration name should not be empty when no extra files are given"
            )
        if any(not name.strip() or not Path(name).name for name in self.config_name):
            raise InvalidPolicy("Configuration names must not be blank")
        self.registry.require(self.default_format)

    # --- Copy helpers ---

    def with_project_path(self, project_path: ProjectPath) -> "ConfigPathMetadata":
        return replace(self, project_path=project_path)

    def with_config_name(self, config_name: Sequence[str]) -> "ConfigPathMetadata":
        return replace(self, config_name=config_name)

    def with_default_format(self, default_format: FileFormat) -> "ConfigPathMetadata":
        return replace(self, default_format=default_format)

    def no_default_format(self) -> "ConfigPathMetadata":
        """Resets the default format to `DEFAULT_FILE_FORMAT`."""
        return replace(self, default_format=DEFAULT_FILE_FORMAT)

    def with_extra_files(
        self, extra_files: Sequence[Path | str]
    ) -> "ConfigPathMetadata":
        return replace(self, extra_files=extra_files)

    def with_extra_folders(
        self, extra_folders: Sequence[Path | str]
    ) -> "ConfigPathMetadata":
        return replace(self, extra_folders=extra_folders)

    def with_config_option(self, config_option: ConfigOption) -> "ConfigPathMetadata":
        return replace(self, config_option=config_option)

    # --- Directories ---

    def sys_dir(self) -> Path:
        """Gets the system-level directory chosen by `config_sys_type`."""
        return system_dir(self.project_path, self.config_option.config_sys_type)

    def _default_file_in(self, directory: Path) -> Path:
        if not self.config_name:
            raise InvalidPolicy("A default file needs at least one configuration name")
        extension = self.registry.extension_for(self.default_format)
        return directory / f"{self.config_name[0]}.{extension}"

    def default_sys_config_file(self) -> Path:
        """The default file inside the system-level directory."""
        return self._default_file_in(self.sys_dir())

    def default_local_config_file(self) -> Path:
        """The default file inside the local directory."""
        return self._default_file_in(local_dir())

    def default_config_file(self) -> Path:
        """The default file on the side that has priority.

        This is the system file when `sys_override_local` is set, and the
        local one otherwise.
        """
        if self.config_option.sys_override_local:
            return self.default_sys_config_file()
        return self.default_local_config_file()

    # --- Search ---

    def candidates(self) -> Iterator[Candidate]:
        """Yields every candidate in search order. See `iter_candidates`."""
        return iter_candidates(self)

    def search_config_file(self) -> RawConfigFile:
        """Searches for an existing configuration file.

        Returns:
            RawConfigFile: A handle that is found or not found.
        """
        return RawConfigFile(self, search(self))

    # --- Shortcuts ---

    def _resolved(self) -> ConfigFile:
        return self.search_config_file().fallback_default()

    def read(self, schema: type[T] | None = None) -> Any:
        """Equivalent to ``search_config_file().fallback_default().read(schema)``."""
        return self._resolved().read(schema)

    def write(self, value: Any) -> None:
        """Equivalent to ``search_config_file().fallback_default().write(value)``."""
        self._resolved().write(value)

    def read_or_default(self, schema: type[T] = dict) -> T:  # type: ignore[assignment]
        """Reads the resolved file, creating it from ``schema()`` if missing."""
        return self._resolved().read_or_default(schema)

    def read_or_new(self, default: T) -> T:
        """Reads the resolved file, creating it from `default` if missing."""
        return self._resolved().read_or_new(default)


def _expand(metadata: ConfigPathMetadata, directory: Path) -> Iterator[Candidate]:
    extensions = metadata.registry.search_extensions(metadata.default_format)
    with_dot = metadata.config_option.allow_dot_prefix
    for name in metadata.config_name:
        # a name may hold sub-directories; only its last component is hidden
        relative = Path(name)
        for ext, file_format in extensions:
            filename = f"{relative.name}.{ext}"
            if with_dot and not relative.name.startswith(DOT_PREFIX):
                hidden = relative.with_name(f"{DOT_PREFIX}{filename}")
                yield Candidate(directory / hidden, file_format)
            yield Candidate(directory / relative.with_name(filename), file_format)


def candidate_exists(candidate: Candidate) -> bool:
    """Checks whether a candidate is an existing file.

    Raises:
        ConfigIOError: If the file system refuses the check.
    """
    try:
        return candidate.path.is_file()
    except OSError as e:
        raise ConfigIOError(candidate.path, "open", e) from e


def iter_candidates(metadata: ConfigPathMetadata) -> Iterator[Candidate]:
    """Yields every candidate of a policy in search order.

    Raises:
        PlatformDirectoryUnavailable: If the system directory is unknown.
        ConfigIOError: If the working directory cannot be determined.
    """
    sys_directory = metadata.sys_dir()
    local_directory = local_dir()

    if metadata.config_option.sys_override_local:
        directories = [sys_directory, local_directory]
    else:
        directories = [local_directory, sys_directory]
    directories.extend(metadata.extra_folders)

    for directory in directories:
        yield from _expand(metadata, directory)

    for extra in metadata.extra_files:
        file_format = metadata.registry.format_for_path(extra)
        if file_format is None:
            logger.debug(f"Skipping {extra}: unsupported extension '{extra.suffix}'")
            continue
        yield Candidate(extra, file_format)


def search(metadata: ConfigPathMetadata) -> ResolutionState:
    """Finds the first existing candidate of a policy.

    Only existence checks are made; no file is opened. Symlinks are followed,
    so a broken symlink does not count as an existing file.

    Returns:
        ResolutionState: FOUND with the candidate's own format, or NOT_FOUND.
    """
    for candidate in iter_candidates(metadata):
        if candidate_exists(candidate):
            logger.info(
                f"Found {candidate.file_format.value} configuration at {candidate.path}"
            )
            return ResolutionState.found(candidate.path, candidate.file_format)
        logger.debug(f"No configuration at {candidate.path}")

    logger.debug(f"No configuration file found for {metadata.project_path.application}")
    return ResolutionState.not_found(metadata.default_format)

"""Project identity and platform-specific configuration directories.

The directory layout follows the usual per-platform conventions:

* Linux/BSD: ``$XDG_CONFIG_HOME/<application>`` (lowercased, no whitespace).
* macOS: ``~/Library/Application Support/<qualifier.organization.application>``,
  with preferences under ``~/Library/Preferences``.
* Windows: ``%APPDATA%\\<organization>\\<application>\\config``.
"""

import enum
import logging
import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs.macos import MacOS
from platformdirs.unix import Unix

from .constants import APP_NAME, MACOS_PREFERENCES_DIR, WINDOWS_CONFIG_SUBDIR
from .errors import PlatformDirectoryUnavailable

logger = logging.getLogger(APP_NAME)


class ConfigType(enum.Enum):
    """The system-level directory used to store configuration files."""

    CONFIG = "config"
    """Use the configuration directory (see `system_config_dir`)."""

    PREFERENCE = "preference"
    """Use the preference directory (see `system_preference_dir`)."""


@dataclass(frozen=True)
class ProjectPath:
    """Your application's identity.

    Attributes:
        qualifier (str): E.g. ``com`` in ``com.GitHub.application``.
        organization (str): E.g. ``GitHub`` in ``com.GitHub.application``.
        application (str): E.g. ``application`` in ``com.GitHub.application``.
    """

    qualifier: str
    organization: str
    application: str

    def with_qualifier(self, qualifier: str) -> "ProjectPath":
        return replace(self, qualifier=qualifier)

    def with_organization(self, organization: str) -> "ProjectPath":
        return replace(self, organization=organization)

    def with_application(self, application: str) -> "ProjectPath":
        return replace(self, application=application)

    @property
    def unix_name(self) -> str:
        """str: The directory name used on Linux and other XDG platforms."""
        return "".join(self.application.lower().split())

    @property
    def bundle_id(self) -> str:
        """str: The reverse-DNS style identifier used on macOS."""
        parts = [self.qualifier, self.organization, self.application]
        return ".".join("-".join(p.split()) for p in parts if p.strip())


def _checked(raw: str, project: ProjectPath) -> Path:
    path = Path(raw)
    # expanduser leaves "~" untouched when no home directory can be found.
    if not path.is_absolute():
        raise PlatformDirectoryUnavailable(
            f"No project directory found for '{project.application}' ({raw})"
        )
    return path


def _require_name(project: ProjectPath) -> None:
    if not project.application.strip():
        raise PlatformDirectoryUnavailable(
            "No project directory found: the application name is empty"
        )


def _windows_config_dir(project: ProjectPath) -> str:
    from platformdirs.windows import Windows

    parts = [Windows(roaming=True).user_config_dir]
    if project.organization.strip():
        parts.append(project.organization)
    parts.extend([project.application, WINDOWS_CONFIG_SUBDIR])
    return os.path.join(*parts)



def system_config_dir(project: ProjectPath) -> Path:
    """Gets the configuration directory of an application.

    Args:
        project (ProjectPath): The application identity.

    Returns:
        Path: The platform configuration directory. It may not exist yet.

    Raises:
        PlatformDirectoryUnavailable: If the directory cannot be determined.
    """
    _require_name(project)
    if sys.platform == "darwin":
        raw = MacOS(project.bundle_id).user_data_dir
    elif sys.platform == "win32":
        raw = _windows_config_dir(project)
    else:
        raw = Unix(project.unix_name).user_config_dir
    return _checked(raw, project)


def system_preference_dir(project: ProjectPath) -> Path:
    """Gets the preference directory of an application.

    This only differs from `system_config_dir` on macOS.

    Raises:
        PlatformDirectoryUnavailable: If the directory cannot be determined.
    """
    _require_name(project)
    if sys.platform == "darwin":
        raw = os.path.join(
            os.path.expanduser(f"~/{MACOS_PREFERENCES_DIR}"), project.bundle_id
        )
        return _checked(raw, project)
    return system_config_dir(project)


def system_dir(project: ProjectPath, sys_type: ConfigType) -> Path:
    """Gets the system-level directory selected by `sys_type`."""
    if sys_type is ConfigType.PREFERENCE:
        path = system_preference_dir(project)
    else:
        path = system_config_dir(project)
    logger.debug(f"System {sys_type.value} directory for {project.application}: {path}")
    return path

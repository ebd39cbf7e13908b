"""Library-wide constants for cfgonce.

This module defines the logger identity, the default search options and the
environment variables consulted when resolving the "local" directory.
"""

# --- Identity ---
APP_NAME = "cfgonce"
"""str: The logger name and console script name."""

# --- Search defaults ---
DEFAULT_ALLOW_DOT_PREFIX = True
"""bool: Whether `.name.ext` files are considered by default."""

DEFAULT_SYS_OVERRIDE_LOCAL = False
"""bool: Whether system-level files take precedence over local ones by default."""

DOT_PREFIX = "."
"""str: The prefix marking a hidden configuration file."""

# --- Environment ---
LOCAL_DIR_ENV = "CFGONCE_CWD"
"""str: Environment variable overriding the directory searched as "local"."""

# --- Platform layout ---
WINDOWS_CONFIG_SUBDIR = "config"
"""str: Sub-directory appended to the roaming app data folder on Windows."""

MACOS_PREFERENCES_DIR = "Library/Preferences"
"""str: Location of preference bundles relative to the home directory on macOS."""

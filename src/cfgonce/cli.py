import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from .constants import APP_NAME
from .errors import ConfigError
from .files import ConfigFile
from .formats import DEFAULT_FILE_FORMAT, FileFormat
from .path import ConfigOption, ConfigPathMetadata, candidate_exists, search
from .project import ConfigType, ProjectPath

logger = logging.getLogger(APP_NAME)
console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Configures the logging subsystem.

    Args:
        verbose (bool): If True, logs every candidate checked at DEBUG level.
    """
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s", "%Y-%m-%d %H:%M:%S"
    )
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_metadata(args: argparse.Namespace) -> ConfigPathMetadata:
    """Builds the search policy described by the command line flags."""
    option = ConfigOption(
        allow_dot_prefix=not args.no_dot_prefix,
        sys_override_local=args.sys_first,
        config_sys_type=ConfigType.PREFERENCE if args.preference else ConfigType.CONFIG,
    )
    return ConfigPathMetadata(
        project_path=ProjectPath(args.qualifier, args.organization, args.application),
        config_name=args.name or [args.application],
        default_format=FileFormat(args.format),
        extra_files=args.extra_file,
        extra_folders=args.extra_folder,
        config_option=option,
    )


def show_paths(metadata: ConfigPathMetadata) -> None:
    """Prints every candidate in search order, marking the ones that exist."""
    selected = search(metadata).path

    table = Table(title=f"Search order for {metadata.project_path.application}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Path", overflow="fold")
    table.add_column("Format", style="cyan")
    table.add_column("Exists", no_wrap=True)

    for index, candidate in enumerate(metadata.candidates(), start=1):
        if candidate.path == selected:
            mark = "[bold green]✔ selected[/bold green]"
            selected = None
        elif candidate_exists(candidate):
            mark = "[yellow]shadowed[/yellow]"
        else:
            mark = ""
        table.add_row(
            str(index), str(candidate.path), candidate.file_format.value, mark
        )

    console.print(table)



def find_config(metadata: ConfigPathMetadata) -> bool:
    """Prints the resolved configuration file, if any."""
    raw = metadata.search_config_file()
    if raw.unchecked_path is None:
        err_console.print("[yellow]No configuration file found.[/yellow]")
        return False
    console.print(
        str(raw.unchecked_path), soft_wrap=True, markup=False, highlight=False
    )
    return True


def show_config(metadata: ConfigPathMetadata) -> None:
    """Prints the parsed contents of the resolved configuration file."""
    config_file = metadata.search_config_file().check()
    console.print(f"[dim]{config_file.path} ({config_file.file_format.value})[/dim]")
    console.print(config_file.read())


def init_config(metadata: ConfigPathMetadata) -> ConfigFile:
    """Creates the default configuration file unless one already exists."""
    config_file = metadata.search_config_file().fallback_default()
    if config_file.path.exists():
        console.print(
            f"Configuration already exists at [cyan]{config_file.path}[/cyan]"
        )
    else:
        config_file.read_or_default()
        console.print(
            f"[bold green]✔ Created[/bold green] [cyan]{config_file.path}[/cyan]"
        )
    return config_file


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the cfgonce diagnostic CLI."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Inspect where an application's configuration file is found.",
    )
    parser.add_argument("--qualifier", default="org", help="Qualifier (default: org)")
    parser.add_argument("--organization", default="", help="Organization name")
    parser.add_argument("--application", required=True, help="Application name")
    parser.add_argument(
        "--name",
        action="append",
        help="Configuration file name without extension (repeatable, "
        "default: the application name)",
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in FileFormat],
        default=DEFAULT_FILE_FORMAT.value,
        help=f"Default format (default: {DEFAULT_FILE_FORMAT.value})",
    )
    parser.add_argument(
        "--no-dot-prefix", action="store_true", help="Ignore .<name>.<ext> files"
    )
    parser.add_argument(
        "--sys-first",
        action="store_true",
        help="Search the system directory before the working directory",
    )
    parser.add_argument(
        "--preference",
        action="store_true",
        help="Use the preference directory instead of the config directory",
    )
    parser.add_argument(
        "--extra-folder", action="append", default=[], help="Extra folder to search"
    )
    parser.add_argument(
        "--extra-file", action="append", default=[], help="Extra file to search"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("paths", help="List every candidate in search order")
    subparsers.add_parser("find", help="Print the resolved configuration file")
    subparsers.add_parser("show", help="Print the parsed configuration")
    subparsers.add_parser("init", help="Create the default configuration file")

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        metadata = build_metadata(args)
        if args.command == "paths":
            show_paths(metadata)
        elif args.command == "find":
            if not find_config(metadata):
                sys.exit(1)
        elif args.command == "show":
            show_config(metadata)
        elif args.command == "init":
            init_config(metadata)
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

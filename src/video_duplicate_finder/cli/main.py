"""CLI entry point for video duplicate finder."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.text import Text

from .. import __version__
from ..core import ApplicationConfig, ConfigurationError, DuplicateFinderError, UserConfig
from ..ui import DuplicateFinder


def setup_logging(level: str = "WARNING") -> None:
    """
    Set up logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def resolve_path(path: Path) -> Path:
    """
    Resolve an input path to an absolute path.

    Raises:
        ConfigurationError: If the path does not exist or is not a directory
    """
    if not path.exists():
        raise ConfigurationError(f"Input path does not exist or is not accessible: '{path}'")
    if not path.is_dir():
        raise ConfigurationError(f"Input path is not a directory: '{path}'")
    return path.resolve()


def resolve_roots(paths: list[Path], user_config: UserConfig, use_default: bool = False) -> list[Path]:
    """
    Pick the root directories to scan.

    Default paths from the config file are used with --default, then paths
    given on the command line, then paths from the config file, and finally
    the current working directory.

    Args:
        paths: Paths given on the command line
        user_config: Settings from the user config file
        use_default: Whether --default was given

    Returns:
        Absolute root paths

    Raises:
        ConfigurationError: If a root does not exist
    """
    if use_default and user_config.default_paths:
        candidates = user_config.default_paths
    elif paths:
        candidates = paths
    elif user_config.paths:
        candidates = user_config.paths
    else:
        candidates = [Path.cwd()]

    return [resolve_path(path.expanduser()) for path in candidates]


def build_config(args: argparse.Namespace, user_config: UserConfig) -> ApplicationConfig:
    """
    Combine command line arguments with the user config file.

    Boolean options are enabled if either source enables them. Patterns and
    extensions from the config file come first, followed by the ones given
    on the command line.

    Args:
        args: Parsed command line arguments
        user_config: Settings from the user config file

    Returns:
        Final application configuration
    """
    return ApplicationConfig(
        paths=resolve_roots(args.paths, user_config, args.default),
        extensions=user_config.extensions + args.extension,
        patterns=user_config.patterns + args.pattern,
        recurse=args.recurse or user_config.recurse,
        print_only=args.print_only or user_config.print_only,
        move_files=args.move_files or user_config.move_files,
        dryrun=args.dryrun or user_config.dryrun,
        verbose=args.verbose or user_config.verbose,
        log_level=args.log_level,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="video-duplicate-finder",
        description="Find duplicate video files based on normalized names and identifier patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resolve duplicates interactively
  video-duplicate-finder /path/to/videos --recurse

  # Group by an identifier pattern and only print the groups
  video-duplicate-finder /path/to/videos -g "tt\\d{7}" --print

  # Preview moving duplicates into a Duplicates directory
  video-duplicate-finder /path/to/videos --print --move --dryrun
        """,
    )

    parser.add_argument("paths", nargs="*", type=Path, help="Input directories to search")

    parser.add_argument(
        "-g",
        "--pattern",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Identifier pattern to search for (regex), can be given multiple times",
    )
    parser.add_argument(
        "-e",
        "--extension",
        action="append",
        default=[],
        metavar="EXTENSION",
        help="File extension to include, can be given multiple times",
    )

    parser.add_argument(
        "-m", "--move", dest="move_files", action="store_true",
        help='Move duplicates to a "Duplicates" directory (print mode)',
    )
    parser.add_argument(
        "-p", "--print", dest="print_only", action="store_true",
        help="Only print the duplicate groups instead of resolving them interactively",
    )
    parser.add_argument(
        "-n", "--dryrun", action="store_true", help="Show changes without modifying any file"
    )
    parser.add_argument("-r", "--recurse", action="store_true", help="Recurse into subdirectories")
    parser.add_argument(
        "-d", "--default", action="store_true", help="Use default paths from the config file"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print verbose output")

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code, non-zero only for configuration and terminal errors
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)
    console = Console()

    try:
        user_config = UserConfig.load()
        config = build_config(args, user_config)
        finder = DuplicateFinder(config, console=console)
        finder.run()
        return 0

    except KeyboardInterrupt:
        console.print("\n\nOperation cancelled by user.")
        return 1
    except DuplicateFinderError as e:
        console.print(Text.assemble(("Error", "bold red"), f": {e}"))
        return 1
    except Exception as e:
        logger.exception("Unexpected error occurred")
        console.print(f"Error: {e}", markup=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Chooses between the printed report and the interactive session."""

import logging
from pathlib import Path

from rich.console import Console
from rich.text import Text
from tqdm import tqdm

from ..core.actions import ActionApplier, ApplyResult
from ..core.grouper import DuplicateGrouper
from ..core.models import ApplicationConfig, DuplicateGroup
from ..core.parser import FilenameNormalizer, PatternMatcher
from ..core.scanner import VideoFileScanner
from .app import SessionRunner, run_interactive
from .report import ReportPrinter

logger = logging.getLogger(__name__)


class DuplicateFinder:
    """Finds duplicate groups under the configured roots and resolves them."""

    def __init__(
        self,
        config: ApplicationConfig,
        console: Console | None = None,
        applier: ActionApplier | None = None,
        runner: SessionRunner | None = None,
    ):
        """
        Initialize the finder.

        Patterns are compiled here, so an invalid pattern fails before any
        scanning starts.

        Args:
            config: Application configuration with resolved root paths
            console: Console for user facing output
            applier: Applies interactive decisions, defaults to one honouring config.dryrun
            runner: Drives the interactive session, defaults to the terminal app

        Raises:
            ConfigurationError: If a pattern is not a valid regex
        """
        self.config = config
        self.console = console or Console()
        self.matcher = PatternMatcher.compile(config.patterns)
        self.scanner = VideoFileScanner(config)
        self.grouper = DuplicateGrouper(self.matcher, FilenameNormalizer(), config)
        self.applier = applier or ActionApplier(console=self.console, dryrun=config.dryrun)
        self.runner = runner

    def _print_settings(self) -> None:
        paths = ", ".join(str(path) for path in self.config.paths)
        self.console.print(Text.assemble("Scanning paths: ", (paths, "magenta")))
        self.console.print(f"Extensions: {self.config.extensions}", markup=False)
        if self.config.patterns:
            self.console.print(f"Patterns: {self.config.patterns}", markup=False)

    def find_duplicates(self) -> list[DuplicateGroup]:
        """Scan all roots and group the video files found, showing progress on a terminal."""
        show_progress = self.console.is_terminal

        with tqdm(desc="Scanning", unit="file", leave=False, disable=not show_progress) as bar:
            files = self.scanner.scan_roots(
                self.config.paths,
                progress_callback=lambda current, total=None, message="": bar.update(1),
            )

        if self.config.verbose:
            self.console.print(f"Checking {len(files)} files for duplicates...")

        with tqdm(
            total=len(files), desc="Normalizing", unit="file", leave=False, disable=not show_progress
        ) as bar:
            return self.grouper.find_duplicates(
                files,
                progress_callback=lambda current, total=None, message="": bar.update(current - bar.n),
            )

    def run(self) -> ApplyResult | None:
        """
        Find duplicates and resolve them.

        Returns:
            ApplyResult from the interactive session, None in print mode or
            when there are no duplicates

        Raises:
            TerminalError: If interactive mode cannot use the terminal
        """
        if self.config.verbose:
            self._print_settings()

        groups = self.find_duplicates()
        if not groups:
            self.console.print("[green]No duplicates found[/green]")
            return None

        if not self.config.print_only:
            logger.info(f"Starting interactive session for {len(groups)} groups")
            return run_interactive(groups, self.applier, self.runner)

        printer = ReportPrinter(self.console, dryrun=self.config.dryrun)
        printer.print_groups(groups)

        if self.config.move_files:
            base_directory = self.config.paths[0] if self.config.paths else Path.cwd()
            printer.move_duplicates(groups, base_directory)

        return None

"""Line oriented report of duplicate groups."""

import logging
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm
from rich.text import Text

from ..core.filesystem import get_unique_path, path_to_string_relative
from ..core.models import DuplicateGroup, FileInfo

logger = logging.getLogger(__name__)

DUPLICATES_DIRECTORY = "Duplicates"


def format_path_with_highlight(file: FileInfo) -> Text:
    """
    Format a file's path with the matched identifier highlighted.

    Args:
        file: File to format

    Returns:
        Text with the path relative to the working directory when possible,
        and the pattern match in green
    """
    display = path_to_string_relative(file.path)
    text = Text(display)
    if file.pattern_match is not None:
        # The filename is the tail of the displayed path
        offset = len(display) - len(file.filename)
        start, end = file.pattern_match
        text.stylize("green", offset + start, offset + end)
    return text


class ReportPrinter:
    """Prints duplicate groups and optionally moves the files aside."""

    def __init__(self, console: Console | None = None, dryrun: bool = False):
        """
        Initialize the printer.

        Args:
            console: Console for output and confirmation prompts
            dryrun: Only show moves without performing them
        """
        self.console = console or Console()
        self.dryrun = dryrun

    def print_groups(self, groups: list[DuplicateGroup]) -> None:
        """Print each group key followed by its member paths."""
        self.console.print(f"[bold yellow]Found {len(groups)} duplicate groups:[/bold yellow]")

        for group in groups:
            self.console.print()
            self.console.print(Text.assemble((group.key, "cyan"), ":"))
            for file in group.files:
                self.console.print(Text.assemble("  ", format_path_with_highlight(file)))

    def move_duplicates(self, groups: list[DuplicateGroup], base_directory: Path) -> list[Path]:
        """
        Move the files of each group into Duplicates/<group name>.

        Each move is confirmed separately. Failures are reported and the
        remaining files are still processed.

        Args:
            groups: Groups to move
            base_directory: Directory that will contain the Duplicates directory

        Returns:
            Target paths of the files that were moved
        """
        duplicates_dir = base_directory / DUPLICATES_DIRECTORY
        self.console.print()
        self.console.print(Text(f"Moving duplicates to {duplicates_dir}", style="bold magenta"))

        moved: list[Path] = []
        for group in groups:
            target_dir = duplicates_dir / group.display_name

            for file in group.files:
                target_path = get_unique_path(target_dir, file.filename, file.stem, file.extension)
                label = "[DRYRUN] Move" if self.dryrun else "Move"
                self.console.print(
                    Text.assemble((label, "magenta"), f": {path_to_string_relative(target_path)}")
                )

                if self.dryrun:
                    continue

                if not Confirm.ask("[magenta]Move file?[/magenta]", console=self.console):
                    self.console.print("Skipped")
                    continue

                try:
                    target_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.warning(f"Failed to create directory {target_dir}: {e}")
                    self.console.print(
                        Text.assemble(("Warning", "bold yellow"), f": Failed to create directory {target_dir}: {e}")
                    )
                    continue

                try:
                    file.path.rename(target_path)
                except OSError as e:
                    logger.error(f"Failed to move {file.path} to {target_path}: {e}")
                    self.console.print(Text.assemble(("Error", "bold red"), f": Failed to move file {file.path}: {e}"))
                    continue

                self.console.print("[green]Moved[/green]")
                moved.append(target_path)

        return moved

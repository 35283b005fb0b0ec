"""Resolution actions and their application to the filesystem."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from pathlib import Path

from rich.console import Console
from rich.text import Text

from .filesystem import is_network_path, path_to_string_relative, remove_file, trash_file
from .models import DuplicateGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeepAction:
    """Keep the file at keep_index, optionally renamed, and remove the others."""

    keep_index: int
    rename_to: str | None = None


@dataclass(frozen=True)
class SkipAction:
    """Leave the group untouched."""


@dataclass(frozen=True)
class QuitAction:
    """End the interactive session."""


Action = KeepAction | SkipAction | QuitAction


@dataclass
class ApplyResult:
    """Outcome of applying queued actions."""

    renamed: list[tuple[Path, Path]] = field(default_factory=list)
    deleted: list[Path] = field(default_factory=list)
    trashed: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str, str]] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        """Number of failed file operations."""
        return len(self.failed)


def rename_diff(old: str, new: str) -> tuple[Text, Text]:
    """
    Build a character level diff of two strings.

    Removed characters are red in the old line, added characters green in the
    new line. Whitespace-only changes get a background colour so they show up.

    Args:
        old: Original string
        new: Changed string

    Returns:
        (old line, new line) as rich Text
    """
    old_text = Text()
    new_text = Text()

    for tag, i1, i2, j1, j2 in SequenceMatcher(None, old, new, autojunk=False).get_opcodes():
        if tag == "equal":
            old_text.append(old[i1:i2])
            new_text.append(new[j1:j2])
            continue

        removed = old[i1:i2]
        added = new[j1:j2]
        if removed:
            old_text.append(removed, style="on red" if removed.isspace() else "red")
        if added:
            new_text.append(added, style="on green" if added.isspace() else "green")

    return old_text, new_text


class ActionApplier:
    """Executes queued keep / rename decisions after the interactive session."""

    def __init__(
        self,
        console: Console | None = None,
        dryrun: bool = False,
        network_check: Callable[[Path], bool] = is_network_path,
        trash: Callable[[Path], None] = trash_file,
        remove: Callable[[Path], None] = remove_file,
    ):
        """
        Initialize the applier.

        Args:
            console: Console for user facing output
            dryrun: Print what would happen without touching any file
            network_check: Decides if a path is on a network mount
            trash: Moves a local file to the OS trash
            remove: Permanently deletes a file
        """
        self.console = console or Console()
        self.dryrun = dryrun
        self.network_check = network_check
        self.trash = trash
        self.remove = remove

    def apply(
        self, groups: list[DuplicateGroup], actions: list[tuple[int, KeepAction]]
    ) -> ApplyResult:
        """
        Apply queued actions.

        A failed rename does not prevent deleting the other files of its
        group, and a failed delete does not stop the remaining files or groups.

        Args:
            groups: Groups in the order they were presented
            actions: (group index, keep action) pairs

        Returns:
            ApplyResult with what was renamed, deleted and trashed and what failed
        """
        result = ApplyResult()

        for group_index, action in actions:
            group = groups[group_index]
            logger.debug(f"Applying {action} to {group}")
            self._rename_kept_file(group, action, result)
            self._remove_other_files(group, action, result)

        if result.failed:
            self.console.print(
                f"[yellow]{result.failure_count} file operation(s) failed[/yellow]"
            )
        return result

    def _report_failure(self, result: ApplyResult, path: Path, operation: str, error: Exception) -> None:
        message = str(error)
        result.failed.append((path, operation, message))
        logger.warning(f"Failed to {operation} {path}: {message}")
        self.console.print(
            Text.assemble(("Warning", "bold yellow"), f": Failed to {operation} {path}: {message}")
        )

    def _rename_kept_file(self, group: DuplicateGroup, action: KeepAction, result: ApplyResult) -> None:
        kept = group.files[action.keep_index]
        if not action.rename_to or action.rename_to == kept.stem:
            return

        new_filename = f"{action.rename_to}.{kept.extension}" if kept.extension else action.rename_to
        try:
            new_path = kept.path.with_name(new_filename)
        except ValueError as e:
            # A name containing a path separator
            self._report_failure(result, kept.path, "rename", e)
            return
        if new_path == kept.path:
            return

        self.console.print(Text("[DRYRUN] Rename:" if self.dryrun else "Rename:", style="cyan"))
        old_line, new_line = rename_diff(
            path_to_string_relative(kept.path), path_to_string_relative(new_path)
        )
        self.console.print(old_line)
        self.console.print(new_line)

        if self.dryrun:
            return

        if new_path.exists():
            self._report_failure(
                result, kept.path, "rename", FileExistsError(f"Target already exists: {new_path}")
            )
            return

        try:
            kept.path.rename(new_path)
        except OSError as e:
            self._report_failure(result, kept.path, "rename", e)
            return

        result.renamed.append((kept.path, new_path))

    def _remove_other_files(self, group: DuplicateGroup, action: KeepAction, result: ApplyResult) -> None:
        prefix = "[DRYRUN] " if self.dryrun else ""
        kept_path = group.files[action.keep_index].path

        for i, file in enumerate(group.files):
            if i == action.keep_index:
                continue
            if file.path == kept_path:
                logger.warning(f"Not removing {file.path}, it is the kept file")
                continue

            # Trash does not work reliably on network shares
            if self.network_check(file.path):
                self.console.print(Text.assemble((f"{prefix}Delete", "red"), f": {file.path}"))
                if self.dryrun:
                    continue
                try:
                    self.remove(file.path)
                except OSError as e:
                    self._report_failure(result, file.path, "delete", e)
                    continue
                result.deleted.append(file.path)
            else:
                self.console.print(Text.assemble((f"{prefix}Trash", "yellow"), f": {file.path}"))
                if self.dryrun:
                    continue
                try:
                    self.trash(file.path)
                except OSError as e:
                    self._report_failure(result, file.path, "trash", e)
                    continue
                result.trashed.append(file.path)

"""Interactive per-group resolution session."""

import logging
from enum import Enum

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from ..core.actions import Action, KeepAction, QuitAction, SkipAction
from ..core.models import DuplicateGroup, FileInfo

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """States of the per-group state machine."""

    BROWSING = "browsing"
    CONFIRMING = "confirming"
    EDITING = "editing"


class GroupSession:
    """Collects a decision for one duplicate group from key presses."""

    def __init__(self, group: DuplicateGroup):
        """
        Initialize the session in the browsing state.

        Args:
            group: Group being decided
        """
        self.group = group
        self.state = SessionState.BROWSING
        self.selected = 0
        self.edit_buffer = ""
        self.cursor_pos = 0

    @property
    def selected_file(self) -> FileInfo:
        """File under the selection cursor."""
        return self.group.files[self.selected]

    def select_next(self) -> None:
        """Move the selection down, stopping at the last file."""
        if self.selected < self.group.file_count - 1:
            self.selected += 1

    def select_prev(self) -> None:
        """Move the selection up, stopping at the first file."""
        if self.selected > 0:
            self.selected -= 1

    def start_editing(self) -> None:
        """Enter rename mode with the selected file's stem and the cursor at the end."""
        self.state = SessionState.EDITING
        self.edit_buffer = self.selected_file.stem
        self.cursor_pos = len(self.edit_buffer)

    def stop_editing(self) -> None:
        """Discard the edit buffer and return to browsing."""
        self.state = SessionState.BROWSING
        self.edit_buffer = ""
        self.cursor_pos = 0

    def insert_char(self, char: str) -> None:
        """Insert text at the cursor."""
        self.edit_buffer = self.edit_buffer[: self.cursor_pos] + char + self.edit_buffer[self.cursor_pos :]
        self.cursor_pos += len(char)

    def delete_char(self) -> None:
        """Delete the character before the cursor."""
        if self.cursor_pos > 0:
            self.edit_buffer = self.edit_buffer[: self.cursor_pos - 1] + self.edit_buffer[self.cursor_pos :]
            self.cursor_pos -= 1

    def delete_char_forward(self) -> None:
        """Delete the character at the cursor."""
        if self.cursor_pos < len(self.edit_buffer):
            self.edit_buffer = self.edit_buffer[: self.cursor_pos] + self.edit_buffer[self.cursor_pos + 1 :]

    def handle_key(self, key: str) -> Action | None:
        """
        Feed one key press to the state machine.

        Args:
            key: Key name such as "up", "enter", "esc", "ctrl+c" or a single character

        Returns:
            The action for this group once decided, None while still deciding
        """
        if key == "ctrl+c":
            return QuitAction()

        if self.state is SessionState.EDITING:
            return self._handle_editing_key(key)
        if self.state is SessionState.CONFIRMING:
            return self._handle_confirming_key(key)
        return self._handle_browsing_key(key)

    def _handle_browsing_key(self, key: str) -> Action | None:
        if key in ("q", "esc"):
            return QuitAction()
        if key in ("up", "k"):
            self.select_prev()
        elif key in ("down", "j"):
            self.select_next()
        elif key == "s":
            return SkipAction()
        elif key == "enter":
            self.state = SessionState.CONFIRMING
        elif key == "r":
            self.start_editing()
        return None

    def _handle_confirming_key(self, key: str) -> Action | None:
        if key in ("y", "Y"):
            return KeepAction(keep_index=self.selected)
        if key in ("n", "N", "esc"):
            self.state = SessionState.BROWSING
        return None

    def _handle_editing_key(self, key: str) -> Action | None:
        if key == "esc":
            self.stop_editing()
        elif key == "enter":
            return KeepAction(keep_index=self.selected, rename_to=self.edit_buffer or None)
        elif key == "backspace":
            self.delete_char()
        elif key == "delete":
            self.delete_char_forward()
        elif key == "left":
            self.cursor_pos = max(self.cursor_pos - 1, 0)
        elif key == "right":
            self.cursor_pos = min(self.cursor_pos + 1, len(self.edit_buffer))
        elif key == "home":
            self.cursor_pos = 0
        elif key == "end":
            self.cursor_pos = len(self.edit_buffer)
        elif len(key) == 1 and key.isprintable():
            self.insert_char(key)
        return None


def _file_line(file: FileInfo, is_selected: bool) -> Text:
    path_str = str(file.path)
    line = Text("► " if is_selected else "  ")
    line.append(path_str, style="bold yellow" if is_selected else "")
    if file.pattern_match is not None:
        # The filename is the tail of the path string
        offset = len("► ") + len(path_str) - len(file.filename)
        start, end = file.pattern_match
        line.stylize("green", offset + start, offset + end)
    return line


def render_group(session: GroupSession, group_number: int, total_groups: int) -> RenderableType:
    """
    Render the screen for one group.

    Args:
        session: State of the group being decided
        group_number: Zero-based index of the group
        total_groups: Number of groups in the session

    Returns:
        Renderable with header, file list, status line and key help
    """
    group = session.group
    selected = session.selected_file

    header = Panel(
        Text(f"Duplicate Group {group_number + 1}/{total_groups}: {group.key}", style="bold cyan"),
        title="Duplicate Finder",
        box=box.SQUARE,
    )

    file_list = Panel(
        Group(*(_file_line(file, i == session.selected) for i, file in enumerate(group.files))),
        title="Files (↑/↓ to select)",
        box=box.SQUARE,
    )

    if session.state is SessionState.EDITING:
        before = session.edit_buffer[: session.cursor_pos]
        after = session.edit_buffer[session.cursor_pos :]
        suffix = f".{selected.extension}" if selected.extension else ""
        status = Panel(
            Text(f"New name: {before}│{after}{suffix}", style="green"),
            title="Rename (Enter to confirm, Esc to cancel)",
            box=box.SQUARE,
        )
        help_text = "Type new name | Enter: confirm | Esc: cancel"
    elif session.state is SessionState.CONFIRMING:
        status = Panel(
            Text(
                f"Keep '{selected.filename}' and delete {group.file_count - 1} other file(s)? (y/n)",
                style="yellow",
            ),
            title="Status",
            box=box.SQUARE,
        )
        help_text = "y: confirm | n: cancel"
    else:
        status = Panel(Text(f"Selected: {selected.filename}"), title="Status", box=box.SQUARE)
        help_text = "Enter: keep selected | r: rename & keep | s: skip | q: quit"

    help_panel = Panel(Text(help_text, style="bright_black"), title="Help", box=box.SQUARE)
    return Group(header, file_list, status, help_panel)


class InteractiveSession:
    """
    Walks through the groups in order and queues the keep decisions.

    Keys are fed one at a time, so any key source can drive the session:
    the terminal app in normal use, a plain list of key names in tests.
    """

    def __init__(self, groups: list[DuplicateGroup]):
        """
        Initialize the session.

        Args:
            groups: Groups sorted by key
        """
        self.groups = groups
        self.group_number = 0
        self.actions: list[tuple[int, KeepAction]] = []
        self.current: GroupSession | None = GroupSession(groups[0]) if groups else None

    @property
    def finished(self) -> bool:
        """True once every group is decided or the session was quit."""
        return self.current is None

    def feed(self, key: str) -> bool:
        """
        Feed one key press to the current group.

        Quitting stops at the current group; decisions made for earlier groups
        are kept.

        Args:
            key: Key name such as "up", "enter", "esc", "ctrl+c" or a single character

        Returns:
            True once the session is finished
        """
        if self.current is None:
            return True

        action = self.current.handle_key(key)
        if action is None:
            return False

        if isinstance(action, QuitAction):
            logger.info(f"Session quit at group {self.group_number + 1}/{len(self.groups)}")
            self.current = None
            return True

        if isinstance(action, KeepAction):
            self.actions.append((self.group_number, action))

        self.group_number += 1
        if self.group_number < len(self.groups):
            self.current = GroupSession(self.groups[self.group_number])
        else:
            self.current = None
        return self.current is None

    def render(self) -> RenderableType:
        """Render the screen for the group being decided."""
        if self.current is None:
            return Text("")
        return render_group(self.current, self.group_number, len(self.groups))

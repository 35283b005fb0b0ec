"""Tests for the interactive resolution session."""

from pathlib import Path

import pytest
from rich.console import Console

from ...core.actions import KeepAction, QuitAction, SkipAction
from ...core.models import DuplicateGroup, FileInfo
from ..session import (
    GroupSession,
    InteractiveSession,
    SessionState,
    _file_line,
    render_group,
)


def make_group(key: str, *names: str) -> DuplicateGroup:
    """Helper to create a group from file names."""
    files = [FileInfo.from_path(Path(f"/videos/dir{i}/{name}")) for i, name in enumerate(names)]
    return DuplicateGroup(key=key, files=files)


@pytest.fixture
def group():
    return make_group("movie", "movie.1080p.mkv", "movie.720p.mp4", "movie.avi")


class TestGroupSession:
    """Test cases for the per-group state machine."""

    def test_initial_state(self, group) -> None:
        session = GroupSession(group)

        assert session.state is SessionState.BROWSING
        assert session.selected == 0

    def test_navigation_is_clamped(self, group) -> None:
        """Test moving the selection with arrows and j/k."""
        session = GroupSession(group)

        assert session.handle_key("up") is None
        assert session.selected == 0

        for key in ["down", "j", "down", "j"]:
            session.handle_key(key)
        assert session.selected == 2

        session.handle_key("k")
        assert session.selected == 1

    def test_quit_keys(self, group) -> None:
        """Test that q and Esc quit while browsing."""
        assert GroupSession(group).handle_key("q") == QuitAction()
        assert GroupSession(group).handle_key("esc") == QuitAction()

    def test_skip(self, group) -> None:
        assert GroupSession(group).handle_key("s") == SkipAction()

    def test_keep_requires_confirmation(self, group) -> None:
        """Test that Enter asks for confirmation and y keeps the selected file."""
        session = GroupSession(group)
        session.handle_key("down")

        assert session.handle_key("enter") is None
        assert session.state is SessionState.CONFIRMING
        assert session.handle_key("y") == KeepAction(keep_index=1)

    def test_confirmation_cancel(self, group) -> None:
        """Test that n and Esc return to browsing without an action."""
        for key in ["n", "N", "esc"]:
            session = GroupSession(group)
            session.handle_key("enter")

            assert session.handle_key(key) is None
            assert session.state is SessionState.BROWSING

    def test_confirmation_ignores_other_keys(self, group) -> None:
        session = GroupSession(group)
        session.handle_key("enter")

        assert session.handle_key("j") is None
        assert session.state is SessionState.CONFIRMING
        assert session.selected == 0

    def test_rename_starts_with_stem(self, group) -> None:
        """Test that editing starts from the selected file's stem with the cursor at the end."""
        session = GroupSession(group)
        session.handle_key("j")
        session.handle_key("r")

        assert session.state is SessionState.EDITING
        assert session.edit_buffer == "movie.720p"
        assert session.cursor_pos == len("movie.720p")

    def test_rename_editing(self, group) -> None:
        """Test editing keys and confirming the new name."""
        session = GroupSession(group)
        session.handle_key("r")
        for _ in range(len(".1080p")):
            session.handle_key("backspace")
        session.handle_key("home")
        session.handle_key("delete")
        session.handle_key("M")
        session.handle_key("end")
        for char in " (2024)":
            session.handle_key(char)

        assert session.edit_buffer == "Movie (2024)"
        assert session.handle_key("enter") == KeepAction(keep_index=0, rename_to="Movie (2024)")

    def test_rename_cursor_movement(self, group) -> None:
        session = GroupSession(group)
        session.handle_key("r")
        session.handle_key("right")
        assert session.cursor_pos == len("movie.1080p")

        session.handle_key("home")
        session.handle_key("left")
        assert session.cursor_pos == 0
        session.handle_key("backspace")
        assert session.edit_buffer == "movie.1080p"

        session.handle_key("right")
        session.handle_key("x")
        assert session.edit_buffer == "mxovie.1080p"

    def test_rename_empty_name_keeps_without_rename(self, group) -> None:
        session = GroupSession(group)
        session.handle_key("r")
        for _ in range(len("movie.1080p")):
            session.handle_key("backspace")

        assert session.handle_key("enter") == KeepAction(keep_index=0, rename_to=None)

    def test_rename_cancel(self, group) -> None:
        """Test that Esc leaves editing and drops the buffer."""
        session = GroupSession(group)
        session.handle_key("r")
        session.handle_key("x")

        assert session.handle_key("esc") is None
        assert session.state is SessionState.BROWSING
        assert session.edit_buffer == ""

    def test_letters_are_text_while_editing(self, group) -> None:
        """Test that command keys are typed while editing."""
        session = GroupSession(group)
        session.handle_key("r")
        for key in ["q", "s", "j"]:
            assert session.handle_key(key) is None

        assert session.edit_buffer == "movie.1080pqsj"

    @pytest.mark.parametrize("setup_keys", [[], ["enter"], ["r"]])
    def test_ctrl_c_quits_from_every_state(self, group, setup_keys) -> None:
        session = GroupSession(group)
        for key in setup_keys:
            session.handle_key(key)

        assert session.handle_key("ctrl+c") == QuitAction()

    def test_unknown_keys_ignored(self, group) -> None:
        session = GroupSession(group)

        assert session.handle_key("") is None
        assert session.handle_key("x") is None
        assert session.state is SessionState.BROWSING


def feed_all(session: InteractiveSession, *keys: str) -> None:
    """Helper feeding keys until the session finishes."""
    for key in keys:
        if session.feed(key):
            break


class TestInteractiveSession:
    """Test cases for collecting decisions over several groups."""

    def test_collect_actions(self) -> None:
        """Test skip, keep with rename, then quit before the last group."""
        groups = [
            make_group("a", "a.mp4", "a.mkv"),
            make_group("b", "b.1080p.mp4", "b.720p.mp4"),
            make_group("c", "c.mp4", "c.mkv"),
        ]
        keys = ["s", "j", "r"] + ["backspace"] * len("b.720p") + ["N", "e", "w", "enter", "q"]
        session = InteractiveSession(groups)

        feed_all(session, *keys)

        assert session.finished
        assert session.actions == [(1, KeepAction(keep_index=1, rename_to="New"))]

    def test_every_group_decided(self) -> None:
        groups = [make_group("a", "a.mp4", "a.mkv"), make_group("b", "b.mp4", "b.mkv")]
        session = InteractiveSession(groups)

        results = [session.feed(key) for key in ["enter", "y", "down", "enter", "n", "enter", "Y"]]

        assert results == [False] * 6 + [True]
        assert session.actions == [(0, KeepAction(keep_index=0)), (1, KeepAction(keep_index=1))]

    def test_quit_first_group(self) -> None:
        session = InteractiveSession([make_group("a", "a.mp4", "a.mkv")])

        assert session.feed("ctrl+c")
        assert session.finished
        assert session.actions == []

    def test_keys_after_finish_are_ignored(self) -> None:
        session = InteractiveSession([make_group("a", "a.mp4", "a.mkv")])
        session.feed("q")

        assert session.feed("enter")
        assert session.actions == []

    def test_no_groups(self) -> None:
        session = InteractiveSession([])

        assert session.finished
        assert session.feed("enter")

    def test_render_follows_current_group(self) -> None:
        groups = [make_group("a", "a.mp4", "a.mkv"), make_group("b", "b.mp4", "b.mkv")]
        session = InteractiveSession(groups)
        session.feed("s")

        console = Console(record=True, width=120)
        console.print(session.render())

        assert "Duplicate Group 2/2: b" in console.export_text()


class TestRenderGroup:
    """Test cases for the group screen."""

    def render(self, renderable) -> str:
        console = Console(record=True, width=120)
        console.print(renderable)
        return console.export_text()

    def test_browsing_screen(self, group) -> None:
        output = self.render(render_group(GroupSession(group), 0, 3))

        assert "Duplicate Group 1/3: movie" in output
        assert "► " in output
        assert "Selected: movie.1080p.mkv" in output
        assert "q: quit" in output

    def test_confirm_screen(self, group) -> None:
        session = GroupSession(group)
        session.handle_key("enter")

        output = self.render(render_group(session, 1, 3))

        assert "Keep 'movie.1080p.mkv' and delete 2 other file(s)? (y/n)" in output

    def test_edit_screen(self, group) -> None:
        session = GroupSession(group)
        session.handle_key("r")
        session.handle_key("home")

        output = self.render(render_group(session, 0, 1))

        assert "New name: │movie.1080p.mkv" in output

    def test_match_highlight(self) -> None:
        """Test that the matched identifier is highlighted inside the path."""
        file = FileInfo.from_path(Path("/videos/clip.ABC123.mp4")).model_copy(
            update={"pattern_match": (5, 11)}
        )

        line = _file_line(file, is_selected=True)

        green = [span for span in line.spans if span.style == "green"]
        assert len(green) == 1
        assert line.plain[green[0].start : green[0].end] == "ABC123"

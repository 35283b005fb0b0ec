"""Tests for the printed report and moving duplicates."""

from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console
from rich.text import Text

from ...core.models import DuplicateGroup, FileInfo
from ..report import ReportPrinter, format_path_with_highlight


@pytest.fixture
def console():
    return Console(record=True, width=200)


@pytest.fixture
def video_groups(tmp_path):
    """Create two groups of real files, the second found by an identifier pattern."""
    movies = []
    for directory in ["a", "b"]:
        path = tmp_path / directory / "movie.mp4"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(directory)
        movies.append(FileInfo.from_path(path))

    clips = []
    for name in ["clip.ABC123.mp4", "other.ABC123.mkv"]:
        path = tmp_path / "a" / name
        path.write_text(name)
        clips.append(FileInfo.from_path(path).model_copy(update={"pattern_match": (name.index("ABC"), name.index("ABC") + 6)}))

    return [
        DuplicateGroup(key="movie", files=movies),
        DuplicateGroup(key="clip.abc123", files=clips),
    ]


class TestReportPrinter:
    """Test cases for ReportPrinter class."""

    def test_print_groups(self, tmp_path, monkeypatch, console, video_groups) -> None:
        """Test that members sharing a filename are told apart by their paths."""
        monkeypatch.chdir(tmp_path)

        ReportPrinter(console).print_groups(video_groups)

        output = console.export_text()
        assert "Found 2 duplicate groups:" in output
        assert "movie:" in output
        assert f"  {Path('a') / 'movie.mp4'}\n" in output
        assert f"  {Path('b') / 'movie.mp4'}\n" in output
        assert f"  {Path('a') / 'clip.ABC123.mp4'}" in output
        assert f"  {Path('a') / 'other.ABC123.mkv'}" in output

    def test_print_groups_highlights_identifier(self, tmp_path, monkeypatch, video_groups) -> None:
        monkeypatch.chdir(tmp_path)
        console = Console(record=True, width=200)

        with patch.object(console, "print", wraps=console.print) as mock_print:
            ReportPrinter(console).print_groups(video_groups[1:])

        lines = [c.args[0] for c in mock_print.call_args_list if c.args and isinstance(c.args[0], Text)]
        clip_line = next(line for line in lines if "clip.ABC123" in line.plain)
        green = [span for span in clip_line.spans if span.style == "green"]
        assert [clip_line.plain[s.start : s.end] for s in green] == ["ABC123"]

    def test_move_duplicates(self, tmp_path, console, video_groups) -> None:
        """Test moving confirmed files into Duplicates/<group name>."""
        with patch("rich.prompt.Confirm.ask", return_value=True) as mock_ask:
            moved = ReportPrinter(console).move_duplicates(video_groups, tmp_path)

        duplicates = tmp_path / "Duplicates"
        assert mock_ask.call_count == 4
        assert moved == [
            duplicates / "movie" / "movie.mp4",
            duplicates / "movie" / "movie.1.mp4",
            duplicates / "ABC123" / "clip.ABC123.mp4",
            duplicates / "ABC123" / "other.ABC123.mkv",
        ]
        assert (duplicates / "movie" / "movie.mp4").read_text() == "a"
        assert (duplicates / "movie" / "movie.1.mp4").read_text() == "b"
        assert not (tmp_path / "a" / "movie.mp4").exists()
        assert "Moved" in console.export_text()

    def test_move_declined(self, tmp_path, console, video_groups) -> None:
        """Test that declined moves leave the files in place."""
        with patch("rich.prompt.Confirm.ask", side_effect=[False, True, False, False]):
            moved = ReportPrinter(console).move_duplicates(video_groups, tmp_path)

        assert moved == [tmp_path / "Duplicates" / "movie" / "movie.mp4"]
        assert (tmp_path / "a" / "movie.mp4").exists()
        assert not (tmp_path / "b" / "movie.mp4").exists()
        assert console.export_text().count("Skipped") == 3

    def test_move_dryrun(self, tmp_path, console, video_groups) -> None:
        """Test that dryrun prints moves without asking or moving."""
        with patch("rich.prompt.Confirm.ask") as mock_ask:
            moved = ReportPrinter(console, dryrun=True).move_duplicates(video_groups, tmp_path)

        mock_ask.assert_not_called()
        assert moved == []
        assert not (tmp_path / "Duplicates").exists()
        assert console.export_text().count("[DRYRUN] Move") == 4

    def test_move_failure_continues(self, tmp_path, console, video_groups) -> None:
        """Test that a failed move is reported and the next file is still moved."""
        (tmp_path / "a" / "movie.mp4").unlink()

        with patch("rich.prompt.Confirm.ask", return_value=True):
            moved = ReportPrinter(console).move_duplicates(video_groups, tmp_path)

        assert len(moved) == 3
        assert "Error: Failed to move file" in console.export_text()


def test_format_path_with_highlight(tmp_path, monkeypatch) -> None:
    """Test that the highlight follows the filename at the end of the relative path."""
    monkeypatch.chdir(tmp_path)
    file = FileInfo.from_path(tmp_path / "show" / "clip.ABC123.mp4").model_copy(
        update={"pattern_match": (5, 11)}
    )

    text = format_path_with_highlight(file)

    assert text.plain == str(Path("show") / "clip.ABC123.mp4")
    [span] = text.spans
    assert span.style == "green"
    assert text.plain[span.start : span.end] == "ABC123"


def test_format_path_outside_working_directory(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    path = tmp_path.parent / "clip.mp4"

    text = format_path_with_highlight(FileInfo.from_path(path))

    assert text.plain == str(path)
    assert text.spans == []

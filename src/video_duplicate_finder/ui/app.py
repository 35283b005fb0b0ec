"""Full-screen terminal app driving the interactive session."""

import logging
import sys
from collections.abc import Callable

from rich.console import Console
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from ..core.actions import ActionApplier, ApplyResult
from ..core.errors import TerminalError
from ..core.models import DuplicateGroup
from .session import InteractiveSession

logger = logging.getLogger(__name__)

SessionRunner = Callable[[InteractiveSession], None]

# Textual key names that differ from the session's
KEY_NAMES = {
    "escape": "esc",
    "return": "enter",
}


def translate_key(key: str, character: str | None) -> str:
    """
    Map a textual key event to a session key name.

    Printable characters are passed as typed, so "Y" and " " reach the
    session unchanged. Everything else uses its key name.

    Args:
        key: Textual key name, such as "escape" or "down"
        character: Character produced by the key, if any

    Returns:
        Session key name
    """
    if character is not None and len(character) == 1 and character.isprintable():
        return character
    return KEY_NAMES.get(key, key)


class DuplicateResolverApp(App):
    """Shows one duplicate group at a time and feeds key presses to the session."""

    ENABLE_COMMAND_PALETTE = False
    BINDINGS = [Binding("ctrl+c", "quit_session", "Quit", show=False, priority=True)]

    def __init__(self, session: InteractiveSession):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Static(id="group")

    def on_mount(self) -> None:
        if self.session.finished:
            self.exit()
            return
        self._redraw()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self._feed(translate_key(event.key, event.character))

    def action_quit_session(self) -> None:
        self._feed("ctrl+c")

    def _feed(self, key: str) -> None:
        if self.session.feed(key):
            self.exit()
        else:
            self._redraw()

    def _redraw(self) -> None:
        self.query_one("#group", Static).update(self.session.render())


def run_in_terminal(session: InteractiveSession, console: Console) -> None:
    """
    Run the session in the full-screen app until it finishes.

    The app holds raw input and the alternate screen for the whole session
    and releases them before returning.

    Raises:
        TerminalError: If stdin or the console is not a terminal
    """
    if not console.is_terminal or not sys.stdin.isatty():
        raise TerminalError("Interactive mode requires a terminal, use --print for a report")

    DuplicateResolverApp(session).run()


def run_interactive(
    groups: list[DuplicateGroup],
    applier: ActionApplier,
    runner: SessionRunner | None = None,
) -> ApplyResult:
    """
    Resolve groups interactively, then apply the decisions.

    No file is renamed or removed until the session has ended and the
    terminal is restored.

    Args:
        groups: Groups to resolve
        applier: Applies the queued decisions
        runner: Drives the session with key presses, defaults to the terminal app

    Returns:
        ApplyResult from the applier

    Raises:
        TerminalError: If the terminal cannot be used
    """
    session = InteractiveSession(groups)
    if runner is None:
        run_in_terminal(session, applier.console)
    else:
        runner(session)

    if not session.actions:
        logger.info("No actions to apply")
        return ApplyResult()

    return applier.apply(groups, session.actions)

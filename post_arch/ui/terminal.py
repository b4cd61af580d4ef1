# post_arch/ui/terminal.py
"""
Interactive terminal front-end for the navigation engine.

Keys are read from the terminal in cbreak mode and mapped to NavEvents through
the readchar key names. Each view is drawn with a rich Live display on the
alternate screen. The terminal is acquired once per
menu run and released by a single teardown that is also registered with
atexit and the SIGINT/SIGTERM handlers.
"""

import atexit
import os
import re
import select
import signal
import sys
import termios
import tty
from collections import deque
from typing import Callable, List, Optional

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from post_arch.menu.navigation import MenuView, NavEvent, NavigationEngine
from post_arch.menu.nodes import MenuNode
from post_arch.utils.exceptions import TerminalError
from post_arch.utils.logger import get_logger

logger = get_logger(__name__)

APP_TITLE = "post-arch"
FOOTER = "↑/↓ move  →/Enter select  ←/ESC back  q quit"

_KEY_EVENTS = {
    readchar.key.UP: NavEvent.MOVE_UP,
    readchar.key.DOWN: NavEvent.MOVE_DOWN,
    readchar.key.ENTER: NavEvent.ACTIVATE,
    readchar.key.CR: NavEvent.ACTIVATE,
    readchar.key.LF: NavEvent.ACTIVATE,
    readchar.key.RIGHT: NavEvent.ACTIVATE,
    readchar.key.ESC: NavEvent.BACK,
    readchar.key.LEFT: NavEvent.BACK,
    readchar.key.BACKSPACE: NavEvent.BACK,
    "\x08": NavEvent.BACK,
    "q": NavEvent.BACK,
    "Q": NavEvent.BACK,
}


def key_to_event(key: str) -> NavEvent:
    """Maps one readchar key to a navigation event. Ctrl-C raises KeyboardInterrupt."""
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt
    event = _KEY_EVENTS.get(key)
    if event is not None:
        return event
    # ESC pressed just before another key can arrive in the same read
    if key.startswith(readchar.key.ESC) and key[1:2] not in ("[", "O"):
        return NavEvent.BACK
    return NavEvent.OTHER


# How long a lone ESC waits for the rest of an escape sequence
ESC_DELAY = 0.025

_KEY_PATTERN = re.compile(r"\x1b\[[0-9;]*[~A-Za-z]|\x1bO.|\x1b[^\x1b]?|.", re.DOTALL)


def split_keys(data: str) -> List[str]:
    """Splits the text of one terminal read into keys, escape sequences kept whole."""
    return _KEY_PATTERN.findall(data)


def render_view(view: MenuView) -> Panel:
    """One row per node, the cursor row in reverse video."""
    table = Table.grid(padding=(0, 1))
    table.add_column()

    for index, node in enumerate(view.nodes):
        if node.is_checkbox:
            row = Text(f"[{'x' if node.checked else ' '}] {node.label}")
        else:
            row = Text(f"-> {node.label}", style="bold")
        if index == view.cursor:
            row.stylize("reverse")
        table.add_row(row)

    if not view.nodes:
        table.add_row(Text("(nothing here)", style="dim"))

    title = " › ".join((APP_TITLE,) + view.trail)
    return Panel(
        table,
        title=Text(title, style="bold cyan"),
        title_align="left",
        subtitle=Text(FOOTER, style="dim"),
        subtitle_align="left",
        border_style="cyan",
    )


class TerminalSession:
    """
    Owns the terminal while the menu is shown.

    close() is idempotent and runs on normal exit, on SIGINT/SIGTERM and at
    interpreter exit, whichever comes first.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else Console(file=sys.stderr)
        self._live: Optional[Live] = None
        self._tty = None
        self._saved_stdin = None
        self._saved_handlers = {}
        self._last_view: Optional[MenuView] = None
        self._fd: Optional[int] = None
        self._saved_mode = None
        self._pending = deque()
        self._closed = True

    def open(self) -> 'TerminalSession':
        if not self.console.is_terminal:
            raise TerminalError("The menu needs an interactive terminal on standard error")

        if not sys.stdin.isatty():
            # The menu document came through a pipe, read keys from the terminal instead
            try:
                self._tty = open("/dev/tty", "r")
            except OSError as e:
                raise TerminalError(f"No terminal available for keyboard input: {e}")
            self._saved_stdin = sys.stdin
            sys.stdin = self._tty

        try:
            self._fd = sys.stdin.fileno()
            self._saved_mode = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        except (OSError, termios.error) as e:
            self._restore_stdin()
            raise TerminalError(f"Could not switch the terminal to key input: {e}")

        try:
            self._live = Live(console=self.console, screen=True, auto_refresh=False, transient=True)
            self._live.start()
        except Exception as e:
            self._restore_mode()
            self._restore_stdin()
            raise TerminalError(f"Could not initialize the terminal: {e}")

        self._closed = False
        atexit.register(self.close)
        self._install_handlers()
        logger.debug("Terminal session opened")
        return self

    def update(self, view: MenuView) -> None:
        self._last_view = view
        if self._live is not None:
            self._live.update(render_view(view), refresh=True)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        if self._live is not None:
            self._live.stop()
            self._live = None
        self._restore_mode()
        self._restore_stdin()
        self._restore_handlers()
        atexit.unregister(self.close)
        logger.debug("Terminal session closed")

    def read_event(self) -> Optional[NavEvent]:
        """
        Next key as a NavEvent, or None at end of input.

        A lone ESC waits ESC_DELAY for the rest of a sequence, after that it is BACK.
        """
        while not self._pending:
            data = os.read(self._fd, 64)
            if not data:
                return None
            if data == b"\x1b":
                ready, _, _ = select.select([self._fd], [], [], ESC_DELAY)
                if ready:
                    data += os.read(self._fd, 64)
            self._pending.extend(split_keys(data.decode("utf-8", errors="replace")))
        return key_to_event(self._pending.popleft())

    def _restore_mode(self) -> None:
        if self._saved_mode is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_mode)
            self._saved_mode = None
        self._fd = None
        self._pending.clear()

    def _restore_stdin(self) -> None:
        if self._saved_stdin is not None:
            sys.stdin = self._saved_stdin
            self._saved_stdin = None
        if self._tty is not None:
            self._tty.close()
            self._tty = None

    def _install_handlers(self) -> None:
        for signum in (signal.SIGINT, signal.SIGTERM):
            self._saved_handlers[signum] = signal.signal(signum, self._on_signal)
        if hasattr(signal, "SIGWINCH"):
            self._saved_handlers[signal.SIGWINCH] = signal.signal(signal.SIGWINCH, self._on_resize)

    def _restore_handlers(self) -> None:
        for signum, handler in self._saved_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._saved_handlers = {}

    def _on_signal(self, signum, frame) -> None:
        self.close()
        sys.exit(128 + signum)

    def _on_resize(self, signum, frame) -> None:
        if self._last_view is not None:
            self.update(self._last_view)

    def __enter__(self) -> 'TerminalSession':
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def run_menu(sections: List[MenuNode], console: Optional[Console] = None,
             read_key: Optional[Callable[[], Optional[NavEvent]]] = None) -> None:
    """
    Shows the menu until the user leaves the top level. Checkbox state is
    changed in place on the given sections.
    """
    engine = NavigationEngine(sections)
    with TerminalSession(console=console) as session:
        engine.run(iter(read_key or session.read_event, None), on_view=session.update)

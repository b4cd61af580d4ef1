import io
import os
from unittest.mock import MagicMock, patch

import pytest
import readchar
from rich.console import Console

# ======= Execute with: pytest tests/test_terminal.py ========

from post_arch.menu.navigation import MenuView, NavEvent
from post_arch.menu.nodes import MenuNode
from post_arch.ui import terminal
from post_arch.ui.terminal import TerminalSession, key_to_event, render_view, run_menu, split_keys
from post_arch.utils.exceptions import TerminalError

# --- Helpers ---

def rendered_text(view):
    console = Console(record=True, width=80, file=io.StringIO())
    console.print(render_view(view))
    return console.export_text()

# ----------------------------------------------------------------------
# --- Keys ---
# ----------------------------------------------------------------------

@pytest.mark.parametrize("key, event", [
    (readchar.key.UP, NavEvent.MOVE_UP),
    (readchar.key.DOWN, NavEvent.MOVE_DOWN),
    (readchar.key.ENTER, NavEvent.ACTIVATE),
    ("\n", NavEvent.ACTIVATE),
    (readchar.key.RIGHT, NavEvent.ACTIVATE),
    (readchar.key.LEFT, NavEvent.BACK),
    (readchar.key.ESC, NavEvent.BACK),
    (readchar.key.BACKSPACE, NavEvent.BACK),
    ("q", NavEvent.BACK),
    ("Q", NavEvent.BACK),
    ("\x1bx", NavEvent.BACK),
    ("a", NavEvent.OTHER),
    (" ", NavEvent.OTHER),
    ("\x1b[Z", NavEvent.OTHER),
])
def test_key_to_event(key, event):
    assert key_to_event(key) is event

def test_ctrl_c_interrupts():
    with pytest.raises(KeyboardInterrupt):
        key_to_event(readchar.key.CTRL_C)

# ----------------------------------------------------------------------
# --- Rendering ---
# ----------------------------------------------------------------------

def test_render_rows():
    nodes = (
        MenuNode.checkbox("vim"),
        MenuNode.checkbox("emacs", checked=False),
        MenuNode.section("editors"),
    )
    text = rendered_text(MenuView(nodes=nodes, cursor=1, trail=("core",)))

    assert "[x] vim" in text
    assert "[ ] emacs" in text
    assert "-> editors" in text
    assert "post-arch › core" in text
    assert "q quit" in text

def test_render_empty_view():
    assert "(nothing here)" in rendered_text(MenuView(nodes=(), cursor=0, trail=()))

# ----------------------------------------------------------------------
# --- Session ---
# ----------------------------------------------------------------------

def test_session_requires_a_terminal():
    session = TerminalSession(console=Console(file=io.StringIO()))
    with pytest.raises(TerminalError):
        session.open()

def test_close_without_open_is_a_no_op():
    session = TerminalSession(console=Console(file=io.StringIO()))
    session.close()
    session.close()

def test_run_menu_feeds_keys_until_back_at_root():
    leaf = MenuNode.checkbox("vim")
    sections = [MenuNode.section("core", [leaf])]
    keys = iter([NavEvent.ACTIVATE, NavEvent.ACTIVATE, NavEvent.BACK, NavEvent.BACK, NavEvent.ACTIVATE])

    session = MagicMock()
    with patch.object(terminal, "TerminalSession") as session_class:
        session_class.return_value.__enter__.return_value = session
        run_menu(sections, read_key=lambda: next(keys))

    assert leaf.checked is False
    assert session.update.call_count == 4
    assert next(keys) is NavEvent.ACTIVATE
    session_class.return_value.__exit__.assert_called_once()

def test_run_menu_releases_terminal_on_interrupt():
    def interrupted():
        raise KeyboardInterrupt

    with patch.object(terminal, "TerminalSession") as session_class:
        session_class.return_value.__exit__.return_value = False
        with pytest.raises(KeyboardInterrupt):
            run_menu([MenuNode.section("core")], read_key=interrupted)

    session_class.return_value.__exit__.assert_called_once()

# ----------------------------------------------------------------------
# --- Reading keys ---
# ----------------------------------------------------------------------

@pytest.fixture
def piped_session():
    """A session reading keys from a pipe instead of a terminal."""
    read_fd, write_fd = os.pipe()
    session = TerminalSession(console=Console(file=io.StringIO()))
    session._fd = read_fd
    yield session, write_fd
    os.close(read_fd)
    try:
        os.close(write_fd)
    except OSError:
        pass

def test_split_keys():
    assert split_keys("\x1b[A\x1b[Bq") == ["\x1b[A", "\x1b[B", "q"]
    assert split_keys("\x1b\x1b[A") == ["\x1b", "\x1b[A"]
    assert split_keys("\x1bOA\x1b[3~x") == ["\x1bOA", "\x1b[3~", "x"]

def test_lone_escape_is_back(piped_session):
    session, write_fd = piped_session
    os.write(write_fd, b"\x1b")
    assert session.read_event() is NavEvent.BACK

def test_keys_read_together_are_all_delivered(piped_session):
    session, write_fd = piped_session
    os.write(write_fd, b"\x1b[B\x1b[B\n")
    events = [session.read_event() for _ in range(3)]
    assert events == [NavEvent.MOVE_DOWN, NavEvent.MOVE_DOWN, NavEvent.ACTIVATE]

def test_end_of_input_ends_reading(piped_session):
    session, write_fd = piped_session
    os.close(write_fd)
    assert session.read_event() is None

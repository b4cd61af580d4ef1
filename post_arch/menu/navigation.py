# post_arch/menu/navigation.py
"""
Keyboard-free navigation over the menu tree.

The engine keeps an explicit stack of frames, one per entered section. Each
frame holds the sibling list it shows and its own cursor. Toggling mutates the
shared tree in place, so a change made inside a section is visible after
leaving it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from post_arch.menu.nodes import MenuNode
from post_arch.utils.logger import get_logger

logger = get_logger(__name__)


class NavEvent(Enum):
    MOVE_UP = "up"
    MOVE_DOWN = "down"
    ACTIVATE = "activate"
    BACK = "back"
    OTHER = "other"


@dataclass
class Frame:
    nodes: List[MenuNode]
    cursor: int = 0
    label: Optional[str] = None


@dataclass(frozen=True)
class MenuView:
    """What a renderer needs to draw one screen."""
    nodes: Tuple[MenuNode, ...]
    cursor: int
    trail: Tuple[str, ...]


class NavigationEngine:

    def __init__(self, forest: List[MenuNode]):
        self._frames: List[Frame] = [Frame(nodes=forest)]
        self.finished = False

    @property
    def frame(self) -> Frame:
        return self._frames[-1]

    @property
    def depth(self) -> int:
        """0 while browsing the top-level sections."""
        return len(self._frames) - 1

    @property
    def cursor(self) -> int:
        return self.frame.cursor

    @property
    def current(self) -> Optional[MenuNode]:
        nodes = self.frame.nodes
        return nodes[self.frame.cursor] if nodes else None

    def view(self) -> MenuView:
        trail = tuple(f.label for f in self._frames if f.label is not None)
        return MenuView(nodes=tuple(self.frame.nodes), cursor=self.frame.cursor, trail=trail)

    def handle(self, event: NavEvent) -> bool:
        """
        Applies one event. Returns False once BACK has been received at the
        top level; later events are ignored.
        """
        if self.finished:
            return False

        frame = self.frame
        last = max(len(frame.nodes) - 1, 0)

        if event is NavEvent.MOVE_UP:
            frame.cursor = max(frame.cursor - 1, 0)
        elif event is NavEvent.MOVE_DOWN:
            frame.cursor = min(frame.cursor + 1, last)
        elif event is NavEvent.ACTIVATE:
            self._activate()
        elif event is NavEvent.BACK:
            if self.depth == 0:
                self.finished = True
                logger.debug("Left the menu")
                return False
            self._frames.pop()

        return True

    def _activate(self) -> None:
        node = self.current
        if node is None:
            return
        if node.is_checkbox:
            node.toggle()
            logger.debug(f"Toggled '{node.label}' -> {node.checked}")
        elif node.children:
            self._frames.append(Frame(nodes=node.children, label=node.label))

    def run(self, events: Iterable[NavEvent], on_view: Optional[Callable[[MenuView], None]] = None) -> None:
        """
        Drives the loop: shows the current view, then applies events until the
        top-level BACK or until the events run out.
        """
        if on_view is not None:
            on_view(self.view())
        for event in events:
            if not self.handle(event):
                return
            if on_view is not None:
                on_view(self.view())

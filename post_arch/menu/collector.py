# post_arch/menu/collector.py

from typing import Iterable, List

from post_arch.config.models import InvocationSettings
from post_arch.menu.nodes import MenuNode


def collect_commands(sections: Iterable[MenuNode], after: Iterable[str], settings: InvocationSettings) -> List[str]:
    """
    Renders every checked checkbox depth-first in document order, then
    appends the trailing commands verbatim.
    """
    commands: List[str] = []
    for root in sections:
        for node in root.walk():
            if node.is_checkbox and node.checked and node.action is not None:
                commands.append(node.action.render(settings))
    commands.extend(after)
    return commands


def count_selected(sections: Iterable[MenuNode]) -> int:
    return sum(1 for root in sections for node in root.walk() if node.is_checkbox and node.checked)

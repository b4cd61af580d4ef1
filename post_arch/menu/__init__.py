# post_arch/menu/__init__.py

from .actions import Action, PackageInstall, ShellScript
from .nodes import MenuNode, MenuDocument
from .builder import build_menu
from .navigation import NavEvent, NavigationEngine, MenuView
from .collector import collect_commands, count_selected

__all__ = [
    "Action",
    "PackageInstall",
    "ShellScript",
    "MenuNode",
    "MenuDocument",
    "build_menu",
    "NavEvent",
    "NavigationEngine",
    "MenuView",
    "collect_commands",
    "count_selected",
]

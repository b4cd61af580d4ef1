# post_arch/menu/builder.py
"""
Builds the menu tree from a decoded YAML document.

    sections:
      core:
        items:
          - vim                       # AUR package, checked
          - name: custom
            enabled: false
            commands: ["echo a", "__MGR__ -S neovim"]
        sections:
          - editors:
              items: [helix]
    after:
      commands: [__NOTIFY__ "done"]

Entries of the wrong shape are skipped; only a document that is not a
mapping is an error.
"""

from typing import Any, List

from post_arch.menu.actions import PackageInstall, ShellScript
from post_arch.menu.nodes import MenuDocument, MenuNode
from post_arch.utils.exceptions import ConfigError, MalformedItemError
from post_arch.utils.logger import get_logger

logger = get_logger(__name__)

_TRUE_WORDS = frozenset(("true", "yes", "on", "y"))
_FALSE_WORDS = frozenset(("false", "no", "off", "n"))


def _is_scalar(value: Any) -> bool:
    # The document is decoded without type resolution, so every YAML scalar is a str
    return isinstance(value, str)


def _as_bool(value: Any, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    logger.warning(f"Unrecognised 'enabled' value {value!r}, keeping it enabled")
    return default


def coerce_commands(value: Any) -> List[str]:
    """
    A scalar or a sequence of scalars as a list of command strings.
    Empty and non-scalar entries are skipped.
    """
    if value is None:
        return []
    entries = value if isinstance(value, list) else [value]
    commands = []
    for entry in entries:
        if not _is_scalar(entry):
            logger.debug(f"Skipping non-scalar command entry: {entry!r}")
            continue
        if entry:
            commands.append(entry)
    return commands


def parse_item(node: Any) -> MenuNode:
    """Parses one item into a checkbox, raising MalformedItemError when it has the wrong shape."""
    if _is_scalar(node):
        if not node:
            raise MalformedItemError(node, "Empty item")
        return MenuNode.checkbox(node)

    if not isinstance(node, dict):
        raise MalformedItemError(node, "Item must be a string or a mapping")

    name = node.get("name")
    if not _is_scalar(name) or not name:
        raise MalformedItemError(node, "Item has no usable 'name'")
    label = name

    enabled = node.get("enabled")
    checked = _as_bool(enabled) if isinstance(enabled, (str, bool)) else True

    commands = coerce_commands(node.get("commands"))
    if commands:
        action = ShellScript(commands=commands)
    else:
        action = PackageInstall(name=label)

    return MenuNode.checkbox(label, action=action, checked=checked)


def _parse_items(value: Any) -> List[MenuNode]:
    entries = value if isinstance(value, list) else [value]
    children = []
    for entry in entries:
        try:
            children.append(parse_item(entry))
        except MalformedItemError as e:
            logger.debug(f"Skipped: {e}")
    return children


def _parse_section_groups(value: Any) -> List[MenuNode]:
    """A section group, or a sequence of them, flattened in encounter order."""
    if isinstance(value, dict):
        return parse_section_group(value)
    if isinstance(value, list):
        nodes = []
        for group in value:
            nodes.extend(parse_section_group(group))
        return nodes
    logger.debug(f"Skipped: 'sections' must be a mapping or a sequence, got {value!r}")
    return []


def parse_section_group(group: Any) -> List[MenuNode]:
    """
    Parses a mapping of section name -> body into one section node per key.
    Anything that is not a mapping yields no sections.
    """
    if not isinstance(group, dict):
        logger.debug(f"Skipped: section group must be a mapping, got {group!r}")
        return []

    sections = []
    for name, body in group.items():
        if not _is_scalar(name) or not name:
            logger.debug(f"Skipped: section name must be a non-empty scalar, got {name!r}")
            continue

        children: List[MenuNode] = []
        if isinstance(body, dict):
            if body.get("sections") is not None:
                children.extend(_parse_section_groups(body["sections"]))
            if body.get("items") is not None:
                children.extend(_parse_items(body["items"]))

        sections.append(MenuNode.section(name, children))
    return sections


def parse_after(document: dict) -> List[str]:
    after = document.get("after")
    if not isinstance(after, dict):
        return []
    return coerce_commands(after.get("commands"))


def build_menu(document: Any, source: str = "<document>") -> MenuDocument:
    """
    Builds the forest and the trailing commands from a decoded document.

    Raises ConfigError when the document is not a mapping.
    """
    if not isinstance(document, dict):
        kind = "empty" if document is None else type(document).__name__
        raise ConfigError(source, f"Menu document must be a mapping, got {kind}")

    sections: List[MenuNode] = []
    if document.get("sections") is not None:
        sections = _parse_section_groups(document["sections"])

    menu = MenuDocument(sections=sections, after=parse_after(document))
    logger.debug(f"Built menu from {source}: {len(menu.sections)} top-level sections, "
                 f"{sum(1 for node in menu.walk() if node.is_checkbox)} items, {len(menu.after)} trailing commands")
    return menu

# post_arch/menu/nodes.py

from typing import Iterator, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from post_arch.menu.actions import Action, PackageInstall


class MenuNode(BaseModel):
    """
    One row of the menu tree: a checkbox leaf carrying an action, or a section
    grouping other nodes. Only 'checked' changes after the tree is built.
    """

    label: str = Field(min_length=1)
    kind: Literal["checkbox", "section"] = "checkbox"
    checked: bool = True
    children: List['MenuNode'] = Field(default_factory=list)
    action: Optional[Action] = None

    @model_validator(mode="after")
    def _check_shape(self) -> 'MenuNode':
        if self.kind == "section" and self.action is not None:
            raise ValueError(f"Section '{self.label}' cannot carry an action")
        if self.kind == "checkbox" and self.children:
            raise ValueError(f"Checkbox '{self.label}' cannot have children")
        if self.kind == "checkbox" and self.action is None:
            raise ValueError(f"Checkbox '{self.label}' needs an action")
        return self

    @classmethod
    def checkbox(cls, label: str, action: Optional[Action] = None, checked: bool = True) -> 'MenuNode':
        """A leaf; without an explicit action the label is installed as an AUR package."""
        return cls(label=label, kind="checkbox", checked=checked,
                   action=action if action is not None else PackageInstall(name=label))

    @classmethod
    def section(cls, label: str, children: Optional[List['MenuNode']] = None) -> 'MenuNode':
        return cls(label=label, kind="section", children=list(children or []))

    @property
    def is_checkbox(self) -> bool:
        return self.kind == "checkbox"

    @property
    def is_section(self) -> bool:
        return self.kind == "section"

    def toggle(self) -> None:
        """Flips a checkbox. Sections have no checked state of their own."""
        if self.is_checkbox:
            self.checked = not self.checked

    def walk(self) -> Iterator['MenuNode']:
        """Yields this node and its descendants, depth-first in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


class MenuDocument(BaseModel):
    """The parsed menu: the forest of top-level sections and the trailing commands."""

    sections: List[MenuNode] = Field(default_factory=list)
    after: List[str] = Field(default_factory=list)

    def walk(self) -> Iterator[MenuNode]:
        for node in self.sections:
            yield from node.walk()


MenuNode.model_rebuild()

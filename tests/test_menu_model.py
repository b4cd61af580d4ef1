import pytest
from pydantic import TypeAdapter, ValidationError

# ======= Execute with: pytest tests/test_menu_model.py ========

from post_arch.config.models import InvocationSettings
from post_arch.menu.actions import Action, PackageInstall, ShellScript
from post_arch.menu.nodes import MenuDocument, MenuNode

# --- Fixtures ---

@pytest.fixture
def settings():
    """Settings with short, recognisable invocations."""
    return InvocationSettings(aur_manager="<mgr>", notify_command="<notify>")

# ----------------------------------------------------------------------
# --- Actions ---
# ----------------------------------------------------------------------

def test_package_install_render(settings):
    assert PackageInstall(name="vim").render(settings) == "<mgr> -S vim"

def test_package_install_render_default_manager():
    rendered = PackageInstall(name="vim").render(InvocationSettings())
    assert rendered == "yay --noconfirm --answerdiff=None --answeredit=None -S vim"

def test_shell_script_joins_with_and(settings):
    assert ShellScript(commands=["echo a", "echo b"]).render(settings) == "echo a && echo b"

def test_shell_script_replaces_aliases_everywhere(settings):
    """Every occurrence of both aliases is replaced on the joined script."""
    script = ShellScript(commands=["__MGR__ -S neovim", "__NOTIFY__ done", "__MGR__ -Syu"])
    assert script.render(settings) == "<mgr> -S neovim && <notify> done && <mgr> -Syu"

def test_shell_script_uses_configured_alias_tokens():
    settings = InvocationSettings(aur_manager="paru", aur_manager_alias="@AUR@")
    assert ShellScript(commands=["@AUR@ -S x", "__MGR__"]).render(settings) == "paru -S x && __MGR__"

def test_actions_are_immutable():
    action = PackageInstall(name="vim")
    with pytest.raises(ValidationError):
        action.name = "emacs"

def test_actions_require_content():
    with pytest.raises(ValidationError):
        PackageInstall(name="")
    with pytest.raises(ValidationError):
        ShellScript(commands=[])

def test_action_union_is_tagged():
    """The 'kind' tag selects the variant."""
    adapter = TypeAdapter(Action)
    assert isinstance(adapter.validate_python({"kind": "package", "name": "vim"}), PackageInstall)
    assert isinstance(adapter.validate_python({"kind": "script", "commands": ["ls"]}), ShellScript)
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "other", "name": "vim"})

# ----------------------------------------------------------------------
# --- Nodes ---
# ----------------------------------------------------------------------

def test_checkbox_defaults_to_package_install():
    node = MenuNode.checkbox("vim")
    assert node.is_checkbox
    assert node.checked is True
    assert node.action == PackageInstall(name="vim")
    assert node.children == []

def test_section_never_carries_action():
    with pytest.raises(ValidationError):
        MenuNode(label="core", kind="section", action=PackageInstall(name="vim"))

def test_checkbox_never_carries_children():
    with pytest.raises(ValidationError):
        MenuNode(label="vim", kind="checkbox", action=PackageInstall(name="vim"),
                 children=[MenuNode.checkbox("x")])

def test_label_must_not_be_empty():
    with pytest.raises(ValidationError):
        MenuNode.checkbox("")

def test_toggle_only_affects_checkboxes():
    leaf = MenuNode.checkbox("vim")
    section = MenuNode.section("core", [leaf])
    before = section.checked

    leaf.toggle()
    section.toggle()

    assert leaf.checked is False
    assert section.checked is before

def test_section_keeps_child_identity():
    """Children are the very objects passed in, so mutations are shared."""
    leaf = MenuNode.checkbox("vim")
    section = MenuNode.section("core", [leaf])
    section.children[0].toggle()
    assert leaf.checked is False

def test_walk_is_depth_first_document_order():
    tree = MenuNode.section("a", [
        MenuNode.section("b", [MenuNode.checkbox("c")]),
        MenuNode.checkbox("d"),
    ])
    document = MenuDocument(sections=[tree, MenuNode.section("e")])
    assert [n.label for n in document.walk()] == ["a", "b", "c", "d", "e"]

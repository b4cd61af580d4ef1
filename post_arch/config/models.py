# post_arch/config/models.py

import tomlkit
import typer
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Optional
from pathlib import Path

from post_arch.utils.exceptions import ConfigError

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "post-arch" / "config.toml"


class InvocationSettings(BaseModel):
    """
    Invocation strings and alias tokens used when rendering actions to shell commands.

    Example config.toml:

        aur_manager = "paru --noconfirm"
        notify_command = "notify-send -t 3000"
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    aur_manager: str = Field("yay --noconfirm --answerdiff=None --answeredit=None", min_length=1)
    aur_manager_alias: str = Field("__MGR__", min_length=1)
    notify_command: str = Field("notify-send -i dialog-information -t 5000 -u critical", min_length=1)
    notify_alias: str = Field("__NOTIFY__", min_length=1)
    script_header: str = Field("# Generated script", min_length=1)

    @classmethod
    def load_settings_from_file(cls, path: Path) -> 'InvocationSettings':
        """Loads and validates a TOML file against the settings schema."""
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(str(path), f"Error reading settings file: {e}")

        try:
            data = tomlkit.parse(content).unwrap()
        except Exception as e:
            raise ConfigError(str(path), f"Invalid TOML format in settings file: {e}")

        # Keys may live at the top level or under a [settings] table
        if isinstance(data.get("settings"), dict):
            data = data["settings"]

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(str(path), f"Invalid settings: {e}")

    def display_summary(self) -> str:
        """Generates a short summary of the invocation settings."""
        s = typer.style("\nINVOCATION SETTINGS", fg=typer.colors.BLUE, bold=True) + "\n"
        s += "----------------------------------------\n"
        s += f"  AUR manager:        {typer.style(self.aur_manager, fg=typer.colors.CYAN)} (alias {self.aur_manager_alias})\n"
        s += f"  Notification:       {typer.style(self.notify_command, fg=typer.colors.CYAN)} (alias {self.notify_alias})\n"
        return s


def load_settings(path: Optional[Path] = None, **overrides: Optional[str]) -> InvocationSettings:
    """
    Returns the invocation settings.

    An explicit path must exist. Without one the default location is used when
    present, else the built-in defaults. Overrides that are not None win over the file.
    """
    if path is not None:
        settings = InvocationSettings.load_settings_from_file(Path(path))
    elif DEFAULT_SETTINGS_PATH.is_file():
        settings = InvocationSettings.load_settings_from_file(DEFAULT_SETTINGS_PATH)
    else:
        settings = InvocationSettings()

    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return settings

    try:
        return InvocationSettings(**{**settings.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigError("command line", f"Invalid settings override: {e}")

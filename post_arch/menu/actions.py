# post_arch/menu/actions.py

from typing import Annotated, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from post_arch.config.models import InvocationSettings


class PackageInstall(BaseModel):
    """Install one AUR package with the configured AUR manager."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["package"] = "package"
    name: str = Field(min_length=1)

    def render(self, settings: InvocationSettings) -> str:
        return f"{settings.aur_manager} -S {self.name}"


class ShellScript(BaseModel):
    """
    Run raw shell commands, chained with '&&'.

    Alias tokens are replaced on the joined script, not per command.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["script"] = "script"
    commands: Tuple[str, ...] = Field(min_length=1)

    def render(self, settings: InvocationSettings) -> str:
        script = " && ".join(self.commands)
        script = script.replace(settings.aur_manager_alias, settings.aur_manager)
        script = script.replace(settings.notify_alias, settings.notify_command)
        return script


Action = Annotated[Union[PackageInstall, ShellScript], Field(discriminator="kind")]

# post_arch/script.py
"""
What happens to the collected commands: printed, written to a script file,
or executed one by one.
"""

import stat
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

import typer

from post_arch.utils.executor import Executor
from post_arch.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_HEADER = "# Generated script"


def render_script(commands: List[str], header: str = DEFAULT_HEADER) -> str:
    """Header comment plus one command per line."""
    return "\n".join([header, *commands]) + "\n"


def default_script_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"generated-script_{now:%d_%m_%Y_%H%M%S}.sh"


def write_script(commands: List[str], filename: Optional[Union[str, Path]] = None,
                 header: str = DEFAULT_HEADER) -> Path:
    """Writes the script and makes it executable for its owner. Returns the path written."""
    path = Path(filename) if filename else Path(default_script_name())
    path.write_text(render_script(commands, header), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    logger.info(f"Wrote {len(commands)} commands to {path}")
    return path


def print_script(commands: List[str], header: str = DEFAULT_HEADER,
                 echo: Callable[[str], None] = typer.echo) -> None:
    echo(render_script(commands, header).rstrip("\n"))


def run_commands(executor: Executor, commands: List[str], dryrun: bool = False) -> int:
    """
    Executes each command through the shell in order.

    Stops at the first failing command by letting its ShellCommandError
    propagate; commands that already ran are not undone. Returns the number
    of commands run.
    """
    total = len(commands)
    for index, command in enumerate(commands, 1):
        executor.run(
            f"[{index}/{total}] {command}",
            command,
            capture_output=False,
            shell=True,
            dryrun=dryrun,
        )
    return total


def run_script_file(executor: Executor, path: Union[str, Path], dryrun: bool = False) -> int:
    """Runs a written script with bash and returns its exit code without raising."""
    exit_code, _, _ = executor.run(
        f"Executing {path}",
        ["bash", str(path)],
        capture_output=False,
        check=False,
        dryrun=dryrun,
    )
    return exit_code

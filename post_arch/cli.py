# post_arch/cli.py

import logging
from pathlib import Path
from typing import Optional

import typer

from post_arch import __version__
from post_arch import core
from post_arch.config.models import load_settings
from post_arch.menu.builder import build_menu
from post_arch.menu.collector import collect_commands, count_selected
from post_arch.script import print_script, run_commands, run_script_file, write_script
from post_arch.source import load_document
from post_arch.ui.terminal import run_menu
from post_arch.utils.exceptions import ConfigError, ShellCommandError, TerminalError
from post_arch.utils.executor import Executor
from post_arch.utils.logger import initialize_app_logger

app = typer.Typer(
    name="post-arch",
    help="Arch-based GNU/Linux post install tool.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"post-arch {__version__}")
        raise typer.Exit()


@app.command()
def run(
    file: str = typer.Option(..., "-f", "--file", metavar="SOURCE",
                             help="YAML menu: a path, an http(s):// or file:// URL, or '-' for standard input."),
    execute: bool = typer.Option(False, "-e", "--exec", help="Execute the generated script."),
    write: bool = typer.Option(False, "-w", "--write", help="Write the script to a file."),
    output: Optional[Path] = typer.Option(None, "-o", "--output",
                                          help="File name for --write (implies --write). Default: generated-script_<date>.sh"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Settings TOML file."),
    aur_manager: Optional[str] = typer.Option(None, "--aur-manager", help="AUR manager invocation, e.g. 'paru --noconfirm'."),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip the menu and use the defaults from the YAML."),
    dry_run: bool = typer.Option(False, "--dry-run", help="With --exec: report what would run without running it."),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show debug output."),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for the log file."),
    version: bool = typer.Option(False, "-V", "--version", callback=_version_callback, is_eager=True,
                                 help="Show the version and exit."),
) -> None:
    """
    Pick AUR packages and command groups from a YAML menu, then print,
    write or execute the resulting shell script.
    """
    try:
        core.app_logger = initialize_app_logger(
            log_directory=log_dir,
            console_log_level=logging.DEBUG if verbose else logging.INFO,
        )
    except OSError as e:
        typer.echo(f"Cannot open the log file: {e}", err=True)
        raise typer.Exit(1)
    log = core.app_logger

    # 1. Settings and menu document; nothing is shown before both load
    try:
        settings = load_settings(config, aur_manager=aur_manager)
        menu = build_menu(load_document(file), source=file)
    except ConfigError as e:
        log.error(str(e))
        raise typer.Exit(1)

    if verbose:
        typer.echo(settings.display_summary(), err=True)

    # 2. Selection
    if not yes:
        try:
            run_menu(menu.sections, console=log.console)
        except TerminalError as e:
            log.error(str(e))
            raise typer.Exit(1)
        except KeyboardInterrupt:
            log.warning("Interrupted, nothing was generated.")
            raise typer.Exit(130)

    commands = collect_commands(menu.sections, menu.after, settings)
    log.info(f"{count_selected(menu.sections)} items selected, {len(commands)} commands in total")

    # 3. Output
    if write or output is not None:
        try:
            path = write_script(commands, output, header=settings.script_header)
        except OSError as e:
            log.error(f"Cannot write the script: {e}")
            raise typer.Exit(1)
        typer.echo(f"# Script saved to {path}")

        if execute:
            typer.echo("Executing script...")
            executor = Executor(logger_instance=log)
            exit_code = run_script_file(executor, path, dryrun=dry_run)
            typer.echo(f"Execution finished with code {exit_code}")
            if exit_code != 0:
                raise typer.Exit(exit_code)

    elif execute:
        typer.echo("Executing directly...")
        log.section("Executing selected commands")
        executor = Executor(logger_instance=log)
        try:
            run_commands(executor, commands, dryrun=dry_run)
        except ShellCommandError as e:
            log.error(f"Command failed: {e.command} (exit code {e.exit_code})")
            raise typer.Exit(e.exit_code if e.exit_code > 0 else 1)
        except KeyboardInterrupt:
            log.warning("Interrupted, remaining commands were not run.")
            raise typer.Exit(130)

    else:
        print_script(commands, header=settings.script_header)


def main():
    """
    Main application
    """
    app()

# post_arch/utils/executor.py

import subprocess
import shlex
from typing import Tuple, Optional, Union, List

from post_arch.utils.exceptions import (
    ShellCommandError,
    CommandNotFoundError,
    InvalidCommandError,
    PermissionDeniedError,
)
from post_arch.utils.logger import RichAppLogger


class Executor:
    """
    Executes shell commands for the generated script, using Dependency Injection
    for logging and centralized exception handling via the RichAppLogger.

    Commands are never timed out: AUR builds routinely run for many minutes.
    """

    def __init__(self, logger_instance: RichAppLogger, shell_path: str = "/bin/bash"):
        """
        Initializes the Executor.
        """
        self.logger = logger_instance

        if not isinstance(shell_path, str) or not shell_path:
            self.logger.error("Shell path must be a non-empty string.")
            raise ValueError("Shell path must be a non-empty string.")

        self._shell_path = shell_path
        self.logger.debug(f"Executor initialized with shell_path: {self._shell_path}")

    def _prepare_command(self, command: list) -> List[str]:
        """
        Validates an argument-list command. Shell strings only go through shell=True.
        """
        if not command:
            self.logger.error("Attempted to prepare an empty command.")
            raise InvalidCommandError(str(command), "Command cannot be empty.")

        if not isinstance(command, list):
            self.logger.error(f"Invalid command type: {type(command)}. Expected a list.")
            raise InvalidCommandError(str(command), "Command must be a list of strings unless shell=True.")
        if not all(isinstance(arg, str) for arg in command):
            raise InvalidCommandError(str(command), "All elements in command list must be strings.")
        return command

    def execute_command(self,
                        command: Union[str, list],
                        capture_output: bool = True,
                        check: bool = True,
                        shell: bool = False,
                        cwd: Optional[str] = None
                        ) -> Tuple[int, str, str]:
        """
        Executes a shell command using subprocess.run. This is the low-level execution method.

        With shell=True the command is handed to the shell as one string, so
        '&&' chains, redirections and globs in generated scripts behave as in bash.
        """
        if not command:
            raise InvalidCommandError(str(command), "Command cannot be empty.")

        cmd_string_for_log = shlex.join(command) if isinstance(command, list) else command

        self.logger.debug(f"Attempting low-level execution: '{cmd_string_for_log}' "
                          f"capture_output={capture_output}, check={check}, shell={shell}")

        try:
            if shell:
                command_to_execute = cmd_string_for_log
            else:
                command_to_execute = self._prepare_command(command)

            process = subprocess.run(
                command_to_execute,
                capture_output=capture_output,
                text=True,
                check=False,
                shell=shell,
                executable=self._shell_path if shell else None,
                cwd=cwd
            )

            stdout = process.stdout if capture_output and process.stdout else ""
            stderr = process.stderr if capture_output and process.stderr else ""
            exit_code = process.returncode

            if check and exit_code != 0:
                self.logger.error(f"Command: '{cmd_string_for_log}', Exit Code: {exit_code}, Stderr: {stderr.strip()}")

                if "command not found" in stderr.lower() or exit_code == 127:
                    raise CommandNotFoundError(command=cmd_string_for_log, stdout=stdout, stderr=stderr)
                elif "permission denied" in stderr.lower() or exit_code == 126:
                    raise PermissionDeniedError(command=cmd_string_for_log, stdout=stdout, stderr=stderr)
                else:
                    raise ShellCommandError(
                        command=cmd_string_for_log,
                        exit_code=exit_code,
                        stdout=stdout,
                        stderr=stderr,
                        message=f"Command failed with exit code {exit_code}"
                    )

            self.logger.debug(f"Low-level execution of '{cmd_string_for_log}' completed with exit code {exit_code}")
            return exit_code, stdout, stderr

        except FileNotFoundError:
            self.logger.error(f"Command '{cmd_string_for_log}' not found. Ensure it's in the system's PATH.")
            raise CommandNotFoundError(command=cmd_string_for_log, stdout="", stderr="Command not found. Check PATH.")
        except PermissionError:
            self.logger.error(f"Permission denied while starting '{cmd_string_for_log}'.")
            raise PermissionDeniedError(command=cmd_string_for_log, stdout="", stderr="Permission denied.")
        except (TypeError, ValueError) as e:
            self.logger.error(f"Argument error during low-level command execution '{cmd_string_for_log}': {e}")
            raise InvalidCommandError(cmd_string_for_log, f"Argument error in command execution: {e}")

    def run(self,
            description: str,
            command: Union[str, list],
            capture_output: bool = True,
            check: bool = True,
            shell: bool = False,
            cwd: Optional[str] = None,
            dryrun: bool = False
            ) -> Tuple[int, str, str]:
        """
        Executes a shell command inside the RichAppLogger's execution_step context manager
        for TUI feedback, logging, and centralized exception handling.

        When output is not captured the command writes straight to the terminal,
        so the step is reported without a spinner.
        """
        if dryrun:
            cmd_string_for_log = shlex.join(command) if isinstance(command, list) else command
            self.logger.info(f"DRY RUN: Execution skipped for: '{description}'")
            self.logger.debug(f"DRY RUN COMMAND: {cmd_string_for_log}")
            return 0, "DRY_RUN_STDOUT", "DRY_RUN_STDERR"

        with self.logger.execution_step(description, spinner=capture_output):

            exit_code, stdout, stderr = self.execute_command(
                command=command,
                capture_output=capture_output,
                check=check,
                shell=shell,
                cwd=cwd
            )

            self.logger.debug(f"Command '{description}' completed with exit code {exit_code}.")
            if stdout:
                self.logger.debug(f"  Stdout:\n{stdout.strip()}")
            if stderr:
                self.logger.debug(f"  Stderr:\n{stderr.strip()}")

            return exit_code, stdout, stderr

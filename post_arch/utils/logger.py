import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union
from contextlib import contextmanager

from rich.console import Console
from rich.text import Text
from rich.logging import RichHandler
from rich.theme import Theme

from post_arch.utils.exceptions import ShellCommandError

APP_LOGGER_NAME = "post_arch"
DEFAULT_LOG_DIRECTORY = Path.home() / ".cache" / "post-arch"
DEFAULT_LOG_FILE_NAME = "post-arch.log"

# --- 1. Custom Log Levels and Subclassed Logger ---
# Define custom levels (must be done before setting LoggerClass)
SECTION_LEVEL_NUM = 25
EXECUTE_LEVEL_NUM = 26
logging.addLevelName(SECTION_LEVEL_NUM, 'SECTION')
logging.addLevelName(EXECUTE_LEVEL_NUM, 'EXECUTE')


class AppLogger(logging.Logger):
    """
    Subclasses logging.Logger to add custom methods for SECTION and EXECUTE levels.
    """

    def section(self, msg, *args, **kwargs):
        """Logs a message at the SECTION level."""
        if self.isEnabledFor(SECTION_LEVEL_NUM):
            self._log(SECTION_LEVEL_NUM, msg, args, **kwargs)

    def execute(self, msg, *args, **kwargs):
        """Logs a message at the EXECUTE level."""
        if self.isEnabledFor(EXECUTE_LEVEL_NUM):
            self._log(EXECUTE_LEVEL_NUM, msg, args, **kwargs)


# Set the custom logger class globally
logging.setLoggerClass(AppLogger)


def get_logger(name: str) -> AppLogger:
    """
    Returns a module logger that propagates into the application logger.
    """
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


# --- 2. File Formatter (For consistent file structure) ---
class FileFormatter(logging.Formatter):
    """
    Detailed formatter for file output.
    """

    def format(self, record):
        # Prepare fixed-width attributes for consistent file structure
        record.levelname_fixed = f"{record.levelname:<9}"
        record.name_fixed = f"{record.name:<15}"
        record.filename_fixed = f"{record.filename:<20}"
        record.lineno_fixed = f"{record.lineno:<5}"

        fmt = '%(asctime)s - %(levelname_fixed)s - %(name_fixed)s - %(filename_fixed)s:%(lineno_fixed)s - %(message)s'
        self._style._fmt = fmt

        return super().format(record)


# --- 3. RichAppLogger Wrapper (Focuses on TUI presentation) ---
class RichAppLogger:
    """
    Manages TUI output via Rich Console and wraps the AppLogger instance.
    """

    def __init__(self, console: Console, logger: AppLogger):
        self.console = console
        self.logger: AppLogger = logger
        self._theme = Theme({"section": "bold yellow on black"})

    def section(self, message: str, *args, **kwargs):
        """Logs a message with the custom SECTION level and prints a styled header to TUI."""
        console_msg = Text(f"SECTION: {message}", style="bold yellow")
        self.console.print(console_msg)

        self.logger.section(f"SECTION: {message}", *args, **kwargs)

    @contextmanager
    def execution_step(self, message: str, spinner: bool = True):
        """
        Context manager reporting one execution step.

        With spinner=True a live Rich Status display shows [RUNNING] until the
        block finishes. Commands that write to the terminal themselves use
        spinner=False, which prints a plain [RUNNING] line instead.
        The step always ends with a permanent [COMPLETED]/[CRITICAL]/[FAILED] line.
        """
        if spinner:
            with self.console.status(f"[bold green]...[/] [RUNNING] {message}", spinner="dots") as status:
                with self._report_step(message):
                    yield status
        else:
            self.console.print(f"[bold green]...[/] [RUNNING] {message}")
            with self._report_step(message):
                yield None

    @contextmanager
    def _report_step(self, message: str):
        # Logged to file only, the console line is printed by execution_step.
        self.logger.execute(f"[RUNNING] {message}")

        try:
            yield

            self.console.print(f"[green]✔ [COMPLETED][/green] {message}")
            self.logger.execute(f"[COMPLETED] {message}")

        except Exception as e:
            is_critical = isinstance(e, ShellCommandError)
            status_tag = "[CRITICAL]" if is_critical else "[FAILED]"

            self.console.print(f"[bold red]✘ {status_tag}[/bold red] {message}")
            self.logger.execute(f"{status_tag} {message}")

            # Command failures carry their own message, anything else gets a traceback
            if is_critical:
                self.logger.debug(f"Execution step failed: {message}: {e}")
            else:
                self.logger.exception(f"Exception during execution step: {message}")
                self.console.print("\n[bold red]Traceback (most recent call last):[/bold red]")
                self.console.print_exception(show_locals=False)

            raise

    # --- Standard Logging Wrappers (Simple pass-through to logger) ---

    def info(self, message, *args, **kwargs):
        self.logger.info(message, *args, **kwargs)

    def warning(self, message, *args, **kwargs):
        self.logger.warning(message, *args, **kwargs)

    def error(self, message, *args, **kwargs):
        self.logger.error(message, *args, **kwargs)

    def debug(self, message, *args, **kwargs):
        self.logger.debug(message, *args, **kwargs)


# --- 4. Custom Filter to Exclude EXECUTE Level ---

class ExecuteFilter(logging.Filter):
    """
    Excludes logs at the EXECUTE level from being processed by the handler.
    The execution_step context manager already prints those to the TUI.
    """
    def filter(self, record):
        return record.levelno != EXECUTE_LEVEL_NUM


# --- 5. Initialization Routine ---
def initialize_app_logger(
    app_name: str = APP_LOGGER_NAME,
    log_directory: Optional[Union[str, Path]] = None,
    log_file_name: str = DEFAULT_LOG_FILE_NAME,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.INFO,
    console: Optional[Console] = None,
) -> RichAppLogger:
    """
    Initializes and configures the AppLogger for file output and Rich Console for TUI.
    """
    logger: AppLogger = logging.getLogger(app_name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    # 1. File Handler Setup
    log_directory = str(log_directory if log_directory is not None else DEFAULT_LOG_DIRECTORY)
    os.makedirs(log_directory, exist_ok=True)
    log_file_path = os.path.join(log_directory, log_file_name)

    file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(FileFormatter())
    logger.addHandler(file_handler)

    # 2. Rich Console Setup
    if console is None:
        console = Console(file=sys.stderr, soft_wrap=True)

    # 3. Rich Handler Setup (For standard logs: INFO, WARNING, ERROR, etc.)
    stream_handler = RichHandler(
        console=console,
        show_time=False,
        show_level=True,
        show_path=False,
        keywords=[],
        level=console_log_level
    )
    stream_handler.addFilter(ExecuteFilter())
    logger.addHandler(stream_handler)

    return RichAppLogger(console, logger)

# post_arch/__init__.py

from .utils.exceptions import PostArchError
from .utils.exceptions import ConfigError
from .utils.exceptions import TerminalError
from .utils.exceptions import ShellCommandError

__all__ = [
    "PostArchError",
    "ConfigError",
    "TerminalError",
    "ShellCommandError",
]

# Versioning
__version__ = "0.1.0"

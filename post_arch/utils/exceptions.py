# post_arch/utils/exceptions.py

class PostArchError(Exception):
    """Base exception for every error raised by post-arch."""


class ConfigError(PostArchError):
    """Raised when the menu document or the settings file cannot be used."""
    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"{self.message} (Source: '{self.source}')")


class MalformedItemError(PostArchError):
    """Raised while building the menu for an entry of the wrong shape. Never leaves the builder."""
    def __init__(self, entry: object, message: str = "Malformed menu entry"):
        self.entry = entry
        self.message = message
        super().__init__(f"{self.message}: {self.entry!r}")


class TerminalError(PostArchError):
    """Raised when the interactive terminal session cannot be initialized."""


class ShellCommandError(PostArchError):
    """Base exception for errors during shell command execution."""
    def __init__(self, command: str, exit_code: int = -1, stdout: str = "", stderr: str = "", message: str = "Command execution failed."):
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.message = message
        super().__init__(f"{self.message} (Command: '{self.command}', Exit Code: {self.exit_code})")


class CommandNotFoundError(ShellCommandError):
    """Exception raised when the command itself is not found."""
    def __init__(self, command: str, stdout: str = "", stderr: str = ""):
        super().__init__(command, exit_code=127, stdout=stdout, stderr=stderr, message="Command not found.") # 127 is common exit code for command not found


class PermissionDeniedError(ShellCommandError):
    """Exception raised when a shell command encounters a permission denied error."""
    def __init__(self, command: str, stdout: str = "", stderr: str = ""):
        super().__init__(command, exit_code=126, stdout=stdout, stderr=stderr, message="Permission denied.") # 126 is common exit code for permission denied


class InvalidCommandError(ShellCommandError):
    """Exception raised for invalid or malformed commands."""
    def __init__(self, command: str, message: str = "Invalid command format"):
        super().__init__(command, exit_code=-2, message=message)

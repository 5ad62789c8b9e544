"""
Standard exit codes for gitresource commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Source configuration or config file error
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Network connection failed
KEY_ERROR = 69           # SSH key provisioning failed
DATA_ERROR = 70          # Payload format or validation error
GIT_ERROR = 72           # Git backend command failed
RESOLUTION_ERROR = 73    # Version could not be resolved
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when the source configuration or payload is invalid."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class PayloadError(CommandError):
    """Raised when the JSON payload on stdin cannot be parsed."""
    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class GitError(CommandError):
    """Raised when a git backend operation fails."""
    def __init__(self, message: str, command: Optional[list] = None,
                 stderr: Optional[str] = None):
        super().__init__(message, GIT_ERROR)
        self.command = command or []
        self.stderr = stderr or ""


class ResolutionError(CommandError):
    """Raised when a version cannot be resolved as a tag or a commit."""
    def __init__(self, message: str):
        super().__init__(message, RESOLUTION_ERROR)


class KeyProvisioningError(CommandError):
    """Raised when the SSH key pair cannot be written or derived."""
    def __init__(self, message: str):
        super().__init__(message, KEY_ERROR)

"""
Standard exit codes for portfolio commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
API_ERROR = 65           # GitHub API call failed
CONFIG_ERROR = 66        # Configuration file error
DATA_ERROR = 70          # Data format or validation error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'GitHubAPIError': API_ERROR,
    'ConfigError': CONFIG_ERROR,
    'StorageError': GENERAL_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'YAMLError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    for cls in type(exc).__mro__:
        if cls.__name__ in EXCEPTION_EXIT_CODES:
            return EXCEPTION_EXIT_CODES[cls.__name__]
    return GENERAL_ERROR

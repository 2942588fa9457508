"""
Error taxonomy and exit codes for autotag.

Every failure the publisher can hit maps onto one of these classes. The
publisher converts them into a FAILED result instead of letting them reach
the process boundary; the exit codes only matter under ``--strict``.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
API_ERROR = 65           # GitHub API call failed
CONFIG_ERROR = 66        # Configuration error
EXTRACTION_ERROR = 70    # Version could not be extracted


class AutotagError(Exception):
    """
    Base exception carrying the exit code used under ``--strict``.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(AutotagError):
    """Raised for unknown strategies, bad patterns or missing context."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class ExtractionError(AutotagError):
    """Raised when a version file is missing, unparsable or has no version."""
    def __init__(self, message: str):
        super().__init__(message, EXTRACTION_ERROR)


class APIError(AutotagError):
    """Raised when a GitHub API call fails."""
    def __init__(self, message: str):
        super().__init__(message, API_ERROR)

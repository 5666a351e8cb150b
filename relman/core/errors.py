"""Process exit codes.

Every CLI command exits with one of these codes. The numeric values are part
of the command-line contract and must stay stable:
- 0: Success
- 1: User error (malformed reference, bad option)
- 2: Environment error (git missing, invalid config)
- 3: Git error (commit/push transaction failed)
- 4: Network error (remote unreachable, auth refused)
- 5: I/O error (file not found, permission denied)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    GIT_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

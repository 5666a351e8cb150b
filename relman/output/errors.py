"""Error presentation utilities.

Centralized formatting and exit code mapping for repository errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relman.core.errors import ErrorCode
from relman.output.console import Style
from relman.repo.errors import (
    MalformedReferenceError,
    NotInitializedError,
    RepoError,
    RepositoryAccessError,
    RepositoryTransactionError,
)

if TYPE_CHECKING:
    from relman.output.console import ConsoleProtocol

__all__ = ["print_repo_error", "repo_error_exit_code"]


def print_repo_error(error: RepoError, console: ConsoleProtocol) -> None:
    """Print a repository error with a hint where one helps."""
    match error:
        case MalformedReferenceError(expected=expected):
            console.error(error.message)
            console.print(f"hint: use the {expected} format", Style.DIM)
        case RepositoryAccessError(target=target, operation=operation, message=message):
            console.error(f"{target}: {operation} failed")
            console.print(message, Style.DIM)
            if operation in ("probe", "clone"):
                console.print("hint: check the token and that the repository exists", Style.DIM)
        case NotInitializedError():
            console.error(error.message)
        case RepositoryTransactionError(target=target, operation=operation, message=message):
            console.error(f"{target}: {operation} failed")
            console.print(message, Style.DIM)


def repo_error_exit_code(error: RepoError) -> int:
    match error:
        case MalformedReferenceError():
            return int(ErrorCode.USER_ERROR)
        case RepositoryAccessError(operation="raw" | "probe" | "clone"):
            return int(ErrorCode.NETWORK_ERROR)
        case RepositoryAccessError(operation="workdir"):
            return int(ErrorCode.IO_ERROR)
        case RepositoryAccessError():
            return int(ErrorCode.GIT_ERROR)
        case NotInitializedError():
            return int(ErrorCode.ENV_ERROR)
        case RepositoryTransactionError(operation="mutate"):
            return int(ErrorCode.IO_ERROR)
        case RepositoryTransactionError():
            return int(ErrorCode.GIT_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.GIT_ERROR)

"""Error types for repository initialization and commit/push transactions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MalformedReferenceError:
    """A reference string does not have the shape the provider expects."""

    reference: str
    expected: str

    @property
    def message(self) -> str:
        return f"invalid git reference: {self.reference!r} (expected {self.expected})"


@dataclass(frozen=True, slots=True)
class RepositoryAccessError:
    """Probing or cloning a remote failed (network, auth, missing ref)."""

    target: str
    operation: str
    message: str


@dataclass(frozen=True, slots=True)
class NotInitializedError:
    """A transaction was requested for a target that was never initialized."""

    target: str

    @property
    def message(self) -> str:
        return f"repository not initialized: {self.target} (call ensure_initialized first)"


@dataclass(frozen=True, slots=True)
class RepositoryTransactionError:
    """A mutation, status, add, commit or push step failed.

    The working copy is left in whatever state the failing step produced.
    """

    target: str
    operation: str
    message: str


RepoError = (
    MalformedReferenceError | RepositoryAccessError | NotInitializedError | RepositoryTransactionError
)

TransactionError = NotInitializedError | RepositoryAccessError | RepositoryTransactionError

InitError = RepositoryAccessError

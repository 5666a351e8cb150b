"""Repository lifecycle: targets, initialization and commit/push transactions.

Usage:
    vcs = GitCli()
    registry = RepositoryRegistry(vcs, console=console)
    orchestrator = CommitPushOrchestrator(registry, vcs, console=console)

    target = parse_github_reference("snowdrop/bom/sb-2.7.x", token=token).unwrap()
    init = await registry.ensure_initialized(target)
    outcome = await orchestrator.commit_and_push(
        target, "Update release", [write_text("release.yml", content)]
    )
"""

from relman.repo.changeset import ChangeSet, compute_change_set
from relman.repo.errors import (
    InitError,
    MalformedReferenceError,
    NotInitializedError,
    RepoError,
    RepositoryAccessError,
    RepositoryTransactionError,
    TransactionError,
)
from relman.repo.handle import RepositoryHandle
from relman.repo.raw import HttpClient, UrllibHttpClient, read_raw_file
from relman.repo.registry import RepositoryRegistry
from relman.repo.resolver import BranchExistence, BranchResolver
from relman.repo.target import (
    GitHubProvider,
    GitLabProvider,
    ProviderKind,
    RepositoryTarget,
    parse_github_reference,
    parse_gitlab_reference,
)
from relman.repo.transaction import (
    CommitPushOrchestrator,
    FileMutation,
    TransactionOutcome,
    copy_file,
    write_text,
)

__all__ = [
    # changeset
    "ChangeSet",
    "compute_change_set",
    # errors
    "InitError",
    "MalformedReferenceError",
    "NotInitializedError",
    "RepoError",
    "RepositoryAccessError",
    "RepositoryTransactionError",
    "TransactionError",
    # handle
    "RepositoryHandle",
    # raw
    "HttpClient",
    "UrllibHttpClient",
    "read_raw_file",
    # registry / resolver
    "BranchExistence",
    "BranchResolver",
    "RepositoryRegistry",
    # target
    "GitHubProvider",
    "GitLabProvider",
    "ProviderKind",
    "RepositoryTarget",
    "parse_github_reference",
    "parse_gitlab_reference",
    # transaction
    "CommitPushOrchestrator",
    "FileMutation",
    "TransactionOutcome",
    "copy_file",
    "write_text",
]

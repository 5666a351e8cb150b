"""Git operations module.

- VersionControl: the asynchronous capability the orchestrator depends on
- GitCli: its implementation over the git executable
- WorkingCopyStatus: modified/untracked paths of a working copy
"""

from relman.git.status import StatusEntry, WorkingCopyStatus, parse_porcelain_z
from relman.git.vcs import (
    HEADS_PREFIX,
    Credentials,
    GitCli,
    GitError,
    VersionControl,
    WorkingCopy,
    authenticated_url,
    short_ref,
)

__all__ = [
    # status
    "StatusEntry",
    "WorkingCopyStatus",
    "parse_porcelain_z",
    # vcs
    "HEADS_PREFIX",
    "Credentials",
    "GitCli",
    "GitError",
    "VersionControl",
    "WorkingCopy",
    "authenticated_url",
    "short_ref",
]

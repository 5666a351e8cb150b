"""Repository targets: where a repository lives and how to reach it.

A ``RepositoryTarget`` pairs the (organization, repository, branch)
coordinates with a hosting ``Provider``. Two providers exist:

- GitHub-like: ``<org>/<repo>/<branch>`` references, token credentials,
  public raw-content host.
- GitLab-like: ``<org>/<repo>`` references plus a release identifier that
  yields the branch ``release-manager-<release>``, user+token credentials,
  raw content served by the host itself.

Targets compare and hash by (org, repo, branch, provider kind) only, so
targets parsed independently from the same reference share one registry
entry even when their credentials differ.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from relman.core.config import DEFAULT_BRANCH, GITHUB_HOST, GITHUB_RAW_HOST, GITLAB_HOST, Config
from relman.core.result import Err, Ok, Result
from relman.git.vcs import HEADS_PREFIX, Credentials
from relman.repo.errors import MalformedReferenceError

__all__ = [
    "RELEASE_BRANCH_PREFIX",
    "GitHubProvider",
    "GitLabProvider",
    "Provider",
    "ProviderKind",
    "RepositoryTarget",
    "parse_github_reference",
    "parse_gitlab_reference",
]

RELEASE_BRANCH_PREFIX = "release-manager-"


class ProviderKind(Enum):
    GITHUB = "github"
    GITLAB = "gitlab"

    def __str__(self) -> str:
        return self.value


class Provider(Protocol):
    """Addressing and authentication scheme of a hosting provider."""

    @property
    def kind(self) -> ProviderKind: ...

    @property
    def default_branch(self) -> str: ...

    @property
    def credentials(self) -> Credentials: ...

    def directory_prefix(self, org: str, repo: str) -> str: ...

    def raw_headers(self) -> dict[str, str]: ...

    def remote_url(self, org: str, repo: str) -> str: ...

    def raw_url(self, org: str, repo: str, branch: str, relative_path: str) -> str: ...


@dataclass(frozen=True, slots=True)
class GitHubProvider:
    """Token-authenticated provider with a separate raw-content host."""

    token: str = field(repr=False)
    host: str = GITHUB_HOST
    raw_host: str = GITHUB_RAW_HOST
    default_branch: str = DEFAULT_BRANCH

    @property
    def kind(self) -> ProviderKind:
        return ProviderKind.GITHUB

    @property
    def credentials(self) -> Credentials:
        return Credentials(username=self.token, username_is_secret=True)

    def raw_headers(self) -> dict[str, str]:
        return {"Authorization": f"token {self.token}"} if self.token else {}

    def directory_prefix(self, org: str, repo: str) -> str:
        return f"relman-{org}-{repo}-"

    def remote_url(self, org: str, repo: str) -> str:
        return f"https://{self.host}/{org}/{repo}.git"

    def raw_url(self, org: str, repo: str, branch: str, relative_path: str) -> str:
        return f"https://{self.raw_host}/{org}/{repo}/{branch}/{relative_path.lstrip('/')}"


@dataclass(frozen=True, slots=True)
class GitLabProvider:
    """User+token authenticated provider serving raw content itself."""

    user: str
    token: str = field(repr=False)
    host: str = GITLAB_HOST
    default_branch: str = DEFAULT_BRANCH

    @property
    def kind(self) -> ProviderKind:
        return ProviderKind.GITLAB

    @property
    def credentials(self) -> Credentials:
        return Credentials(username=self.user, password=self.token)

    def raw_headers(self) -> dict[str, str]:
        return {"PRIVATE-TOKEN": self.token} if self.token else {}

    def directory_prefix(self, org: str, repo: str) -> str:
        return f"release-manager-{org}-{repo}-"

    def remote_url(self, org: str, repo: str) -> str:
        return f"https://{self.host}/{org}/{repo}.git"

    def raw_url(self, org: str, repo: str, branch: str, relative_path: str) -> str:
        return f"https://{self.host}/{org}/{repo}/-/raw/{branch}/{relative_path.lstrip('/')}"


@dataclass(frozen=True, slots=True, eq=False)
class RepositoryTarget:
    """An immutable (org, repo, branch, provider) coordinate.

    Attributes:
        org: Organization or group owning the repository
        repo: Repository name
        branch: Branch that transactions commit and push to
        provider: Hosting provider (ignored by equality and hashing)
    """

    org: str
    repo: str
    branch: str
    provider: Provider = field(repr=False)

    @property
    def kind(self) -> ProviderKind:
        return self.provider.kind

    @property
    def key(self) -> tuple[str, str, str, ProviderKind]:
        return (self.org, self.repo, self.branch, self.kind)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepositoryTarget):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.kind}:{self.slug}@{self.branch}"

    @property
    def slug(self) -> str:
        return f"{self.org}/{self.repo}"

    @property
    def remote_url(self) -> str:
        return self.provider.remote_url(self.org, self.repo)

    @property
    def credentials(self) -> Credentials:
        return self.provider.credentials

    @property
    def default_branch(self) -> str:
        return self.provider.default_branch

    @property
    def directory_prefix(self) -> str:
        return self.provider.directory_prefix(self.org, self.repo)

    @property
    def branch_ref(self) -> str:
        return HEADS_PREFIX + self.branch

    @property
    def default_ref(self) -> str:
        return HEADS_PREFIX + self.default_branch

    @property
    def push_refspec(self) -> str:
        """Push the branch to the remote branch of the same name."""
        return f"{self.branch}:{self.branch}"

    def raw_url(self, relative_path: str) -> str:
        """URL serving ``relative_path`` of the branch without cloning."""
        return self.provider.raw_url(self.org, self.repo, self.branch, relative_path)


def _split(reference: str, count: int, expected: str) -> Result[list[str], MalformedReferenceError]:
    segments = reference.strip().split("/")
    if len(segments) != count or any(not s.strip() for s in segments):
        return Err(MalformedReferenceError(reference=reference, expected=expected))
    return Ok([s.strip() for s in segments])


def parse_github_reference(
    reference: str,
    *,
    token: str,
    config: Config | None = None,
) -> Result[RepositoryTarget, MalformedReferenceError]:
    """Parse ``<org>/<repo>/<branch>`` into a GitHub-like target."""
    split = _split(reference, 3, "organization/repository/branch")
    if isinstance(split, Err):
        return split

    org, repo, branch = split.value
    cfg = (config or Config()).github
    provider = GitHubProvider(
        token=token,
        host=cfg.host,
        raw_host=cfg.raw_host,
        default_branch=cfg.default_branch,
    )
    return Ok(RepositoryTarget(org=org, repo=repo, branch=branch, provider=provider))


def parse_gitlab_reference(
    reference: str,
    *,
    release: str,
    user: str,
    token: str,
    config: Config | None = None,
) -> Result[RepositoryTarget, MalformedReferenceError]:
    """Parse ``<org>/<repo>`` plus a release into a GitLab-like target.

    The branch is synthesized as ``release-manager-<release>``.
    """
    split = _split(reference, 2, "organization/repository")
    if isinstance(split, Err):
        return split

    if not release.strip():
        return Err(MalformedReferenceError(reference=reference, expected="a non-empty release identifier"))

    org, repo = split.value
    cfg = (config or Config()).gitlab
    provider = GitLabProvider(user=user, token=token, host=cfg.host, default_branch=cfg.default_branch)
    branch = RELEASE_BRANCH_PREFIX + release.strip()
    return Ok(RepositoryTarget(org=org, repo=repo, branch=branch, provider=provider))

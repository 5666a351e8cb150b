"""Version-control capability used by the repository orchestrator.

``VersionControl`` is the minimal asynchronous surface the orchestrator
needs: list remote heads, clone, branch, checkout, status, stage, commit and
push. ``GitCli`` implements it over the ``git`` executable.

Credentials are supplied per call and embedded into the remote URL only for
the duration of that command. After a clone, ``origin`` is reset to the
plain URL so that no token is persisted in the scratch working copy.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from urllib.parse import quote, urlsplit, urlunsplit

from relman.core.config import GIT_NETWORK_TIMEOUT_SECONDS, GIT_TIMEOUT_SECONDS
from relman.core.result import Err, Ok, Result
from relman.git.status import WorkingCopyStatus, parse_porcelain_z
from relman.platform.process import MASK, ProcessError
from relman.platform.process import run as run_process

__all__ = [
    "Credentials",
    "GitCli",
    "GitError",
    "HEADS_PREFIX",
    "VersionControl",
    "WorkingCopy",
    "authenticated_url",
    "short_ref",
]

HEADS_PREFIX = "refs/heads/"

_NETWORK_COMMANDS = frozenset({"ls-remote", "clone", "push", "fetch"})


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "push")
        message: Error message, credentials masked
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class Credentials:
    """HTTP basic credentials for a remote.

    Token-only schemes put the token in the username slot; they set
    ``username_is_secret`` so that the username is masked too.
    """

    username: str
    password: str = field(default="", repr=False)
    username_is_secret: bool = False

    @property
    def secrets(self) -> tuple[str, ...]:
        """Values to mask in command lines and output, raw and URL-quoted."""
        raw = (self.password, self.username) if self.username_is_secret else (self.password,)
        quoted = tuple(quote(s, safe="") for s in raw)
        return tuple(s for s in (*raw, *quoted) if s)

    def __repr__(self) -> str:
        username = MASK if self.username_is_secret else self.username
        return f"Credentials(username={username!r})"


@dataclass(frozen=True, slots=True)
class WorkingCopy:
    """A cloned repository on disk."""

    root: Path


def short_ref(ref: str) -> str:
    """Strip the refs/heads/ prefix, if any."""
    return ref[len(HEADS_PREFIX) :] if ref.startswith(HEADS_PREFIX) else ref


def authenticated_url(url: str, credentials: Credentials | None) -> str:
    """Embed credentials into an https URL.

    A token-only credential (empty password) becomes the user part alone.
    """
    if credentials is None or not credentials.username:
        return url
    parts = urlsplit(url)
    userinfo = quote(credentials.username, safe="")
    if credentials.password:
        userinfo += ":" + quote(credentials.password, safe="")
    host = parts.netloc.rsplit("@", 1)[-1]
    return urlunsplit((parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment))


class VersionControl(Protocol):
    """Asynchronous version-control operations.

    Every method suspends at the underlying process boundary and reports
    failures as ``Err(GitError)``.
    """

    async def list_remote_branches(
        self, remote_url: str, credentials: Credentials | None
    ) -> Result[frozenset[str], GitError]: ...

    async def clone(
        self, remote_url: str, ref: str, destination: Path, credentials: Credentials | None
    ) -> Result[WorkingCopy, GitError]: ...

    async def create_local_branch(self, working_copy: WorkingCopy, name: str) -> Result[None, GitError]: ...

    async def checkout(self, working_copy: WorkingCopy, name: str) -> Result[None, GitError]: ...

    async def status(self, working_copy: WorkingCopy) -> Result[WorkingCopyStatus, GitError]: ...

    async def stage(self, working_copy: WorkingCopy, paths: tuple[str, ...]) -> Result[None, GitError]: ...

    async def commit(
        self, working_copy: WorkingCopy, message: str, author: tuple[str, str] | None = None
    ) -> Result[str, GitError]: ...

    async def push(
        self, working_copy: WorkingCopy, remote_url: str, refspec: str, credentials: Credentials | None
    ) -> Result[None, GitError]: ...


class GitCli:
    """``VersionControl`` over the git executable.

    Attributes:
        timeout: Seconds allowed for local commands
        network_timeout: Seconds allowed for ls-remote, clone and push
    """

    def __init__(
        self,
        *,
        timeout: float = GIT_TIMEOUT_SECONDS,
        network_timeout: float = GIT_NETWORK_TIMEOUT_SECONDS,
        executable: str = "git",
    ) -> None:
        self.timeout = timeout
        self.network_timeout = network_timeout
        self.executable = executable

    async def list_remote_branches(
        self, remote_url: str, credentials: Credentials | None
    ) -> Result[frozenset[str], GitError]:
        result = await self._run(
            ["ls-remote", "--heads", authenticated_url(remote_url, credentials)],
            cwd=Path(tempfile.gettempdir()),
            credentials=credentials,
        )
        if isinstance(result, Err):
            return Err(_git_error("ls-remote", result.error, "failed to list remote branches"))

        refs: set[str] = set()
        for line in result.value.splitlines():
            _, _, ref = line.partition("\t")
            if ref.strip():
                refs.add(ref.strip())
        return Ok(frozenset(refs))

    async def clone(
        self, remote_url: str, ref: str, destination: Path, credentials: Credentials | None
    ) -> Result[WorkingCopy, GitError]:
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(GitError(command="clone", message=str(e), returncode=-1))

        result = await self._run(
            [
                "clone",
                "--branch",
                short_ref(ref),
                "--single-branch",
                authenticated_url(remote_url, credentials),
                str(destination),
            ],
            cwd=destination.parent,
            credentials=credentials,
        )
        if isinstance(result, Err):
            return Err(_git_error("clone", result.error, "git clone failed"))

        reset = await self._run(["remote", "set-url", "origin", remote_url], cwd=destination)
        if isinstance(reset, Err):
            return Err(_git_error("remote", reset.error, "failed to reset origin url"))

        return Ok(WorkingCopy(root=destination))

    async def create_local_branch(self, working_copy: WorkingCopy, name: str) -> Result[None, GitError]:
        result = await self._run(["branch", name], cwd=working_copy.root)
        if isinstance(result, Err):
            return Err(_git_error("branch", result.error, f"failed to create branch: {name}"))
        return Ok(None)

    async def checkout(self, working_copy: WorkingCopy, name: str) -> Result[None, GitError]:
        result = await self._run(["checkout", name], cwd=working_copy.root)
        if isinstance(result, Err):
            return Err(_git_error("checkout", result.error, f"failed to checkout: {name}"))
        return Ok(None)

    async def status(self, working_copy: WorkingCopy) -> Result[WorkingCopyStatus, GitError]:
        result = await self._run(
            ["status", "--porcelain=v1", "-z", "--untracked-files=all"],
            cwd=working_copy.root,
        )
        if isinstance(result, Err):
            return Err(_git_error("status", result.error, "git status failed"))
        return Ok(WorkingCopyStatus.from_entries(parse_porcelain_z(result.value)))

    async def stage(self, working_copy: WorkingCopy, paths: tuple[str, ...]) -> Result[None, GitError]:
        if not paths:
            return Ok(None)
        result = await self._run(["add", "-A", "--", *paths], cwd=working_copy.root)
        if isinstance(result, Err):
            return Err(_git_error("add", result.error, "git add failed"))
        return Ok(None)

    async def commit(
        self, working_copy: WorkingCopy, message: str, author: tuple[str, str] | None = None
    ) -> Result[str, GitError]:
        identity: list[str] = []
        if author is not None:
            name, email = author
            identity = ["-c", f"user.name={name}", "-c", f"user.email={email}"]

        result = await self._run([*identity, "commit", "-m", message], cwd=working_copy.root)
        if isinstance(result, Err):
            error = _git_error("commit", result.error, "git commit failed")
            if not result.error.stderr.strip():
                error = GitError(
                    command="commit",
                    message="git commit failed (configure user.name/user.email)",
                    returncode=result.error.returncode,
                )
            return Err(error)

        head = await self._run(["rev-parse", "HEAD"], cwd=working_copy.root)
        if isinstance(head, Err):
            return Err(_git_error("rev-parse", head.error, "failed to read commit id"))
        return Ok(head.value.strip())

    async def push(
        self, working_copy: WorkingCopy, remote_url: str, refspec: str, credentials: Credentials | None
    ) -> Result[None, GitError]:
        result = await self._run(
            ["push", authenticated_url(remote_url, credentials), refspec],
            cwd=working_copy.root,
            credentials=credentials,
        )
        if isinstance(result, Err):
            return Err(_git_error("push", result.error, "git push failed"))
        return Ok(None)

    async def _run(
        self,
        args: list[str],
        *,
        cwd: Path,
        credentials: Credentials | None = None,
    ) -> Result[str, ProcessError]:
        """Run a git command, picking the timeout by subcommand."""
        subcommand = next((a for a in args if not a.startswith("-") and "=" not in a), "")
        timeout = self.network_timeout if subcommand in _NETWORK_COMMANDS else self.timeout
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        secrets = credentials.secrets if credentials is not None else ()
        return await run_process(
            [self.executable, *args],
            cwd=cwd,
            env=env,
            timeout=timeout,
            secrets=secrets,
        )


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    message = error.stderr.strip() or error.stdout.strip() or fallback
    return GitError(command=command, message=message, returncode=error.returncode)

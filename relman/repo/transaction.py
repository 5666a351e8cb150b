"""Diff-aware commit/push transactions.

A transaction runs an ordered pipeline of file mutations against a working
copy, asks git which of the written files actually changed, and only then
stages, commits and pushes them:

    mutate (in order) -> status -> change set -> add -> commit -> push

An empty change set is a successful no-op. Failures are not rolled back: the
working copy is scratch state and the caller re-initializes rather than
retrying in place. Transactions on one handle are serialized by the
handle's lock; different targets proceed concurrently.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from relman.core.result import Err, Ok, Result
from relman.git.vcs import VersionControl
from relman.output.console import ConsoleProtocol, Style
from relman.platform.files import atomic_write_text
from relman.repo.changeset import compute_change_set, relative_to_root
from relman.repo.errors import RepositoryTransactionError, TransactionError
from relman.repo.handle import RepositoryHandle
from relman.repo.registry import RepositoryRegistry
from relman.repo.target import RepositoryTarget

__all__ = [
    "CommitPushOrchestrator",
    "FileMutation",
    "TransactionOutcome",
    "apply_mutations",
    "copy_file",
    "write_text",
]

# (working-copy root, paths written by earlier stages) -> path written
type FileMutation = Callable[[Path, tuple[Path, ...]], Path]


@dataclass(frozen=True, slots=True)
class TransactionOutcome:
    """What a transaction did.

    Attributes:
        target: Target description
        paths: Staged root-relative paths (empty for a no-op)
        commit_id: Created commit, None for a no-op
    """

    target: str
    paths: tuple[str, ...] = ()
    commit_id: str | None = None

    @property
    def committed(self) -> bool:
        return self.commit_id is not None


def apply_mutations(root: Path, mutations: Sequence[FileMutation]) -> tuple[Path, ...]:
    """Run mutations in order, feeding each the paths written before it.

    Raises:
        ValueError: A mutation reported a path outside the root.
    """
    written: list[Path] = []
    for mutation in mutations:
        path = mutation(root, tuple(written))
        if relative_to_root(root, path) is None:
            raise ValueError(f"{path} is outside the working copy")
        written.append(path)
    return tuple(written)


def _inside(root: Path, relative_path: str) -> Path:
    path = root / relative_path
    if relative_to_root(root, path) is None:
        raise ValueError(f"{relative_path!r} is outside the working copy")
    return path


def write_text(relative_path: str, content: str) -> FileMutation:
    """Mutation writing ``content`` to ``relative_path`` under the root."""

    def mutate(root: Path, previous: tuple[Path, ...]) -> Path:
        del previous
        path = _inside(root, relative_path)
        atomic_write_text(path, content)
        return path

    return mutate


def copy_file(source: Path, relative_path: str) -> FileMutation:
    """Mutation copying a local file to ``relative_path`` under the root."""

    def mutate(root: Path, previous: tuple[Path, ...]) -> Path:
        del previous
        path = _inside(root, relative_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, path)
        return path

    return mutate


class CommitPushOrchestrator:
    """Runs commit/push transactions against initialized working copies."""

    def __init__(
        self,
        registry: RepositoryRegistry,
        vcs: VersionControl,
        *,
        console: ConsoleProtocol,
        author: tuple[str, str] | None = None,
    ) -> None:
        self._registry = registry
        self._vcs = vcs
        self._console = console
        self._author = author

    async def commit_and_push(
        self,
        target: RepositoryTarget,
        message: str,
        mutations: Sequence[FileMutation],
    ) -> Result[TransactionOutcome, TransactionError]:
        """Transaction on a registered target.

        Fails with NotInitializedError, without touching git, when
        ``ensure_initialized`` was never called for the target.
        """
        handle = await self._registry.handle(target)
        if isinstance(handle, Err):
            return handle
        return await self.commit_and_push_handle(handle.value, message, mutations)

    async def commit_and_push_handle(
        self,
        handle: RepositoryHandle,
        message: str,
        mutations: Sequence[FileMutation],
    ) -> Result[TransactionOutcome, TransactionError]:
        target = handle.target
        name = str(target)

        def fail(operation: str, detail: str) -> Err[RepositoryTransactionError]:
            return Err(RepositoryTransactionError(target=name, operation=operation, message=detail))

        async with handle.transaction() as working_copy:
            try:
                written = await asyncio.to_thread(apply_mutations, working_copy.root, mutations)
            except Exception as e:
                return fail("mutate", str(e) or type(e).__name__)

            status = await self._vcs.status(working_copy)
            if isinstance(status, Err):
                return fail("status", status.error.message)

            change_set = compute_change_set(working_copy.root, written, status.value)
            if change_set.is_empty:
                self._console.info(f"no changes detected in {target.slug}")
                return Ok(TransactionOutcome(target=name))

            for path in change_set.paths:
                self._console.print(f"added {path}", Style.DIM)
            staged = await self._vcs.stage(working_copy, change_set.paths)
            if isinstance(staged, Err):
                return fail("add", staged.error.message)

            commit = await self._vcs.commit(working_copy, message, self._author)
            if isinstance(commit, Err):
                return fail("commit", commit.error.message)
            self._console.info(f"committed {commit.value[:8]}: {message}")

            self._console.print(f"git push {target.remote_url} {target.push_refspec}", Style.DIM)
            pushed = await self._vcs.push(
                working_copy,
                target.remote_url,
                target.push_refspec,
                target.credentials,
            )
            if isinstance(pushed, Err):
                return fail("push", pushed.error.message)
            self._console.success(f"pushed {target.branch} to {target.slug}")

            return Ok(TransactionOutcome(target=name, paths=change_set.paths, commit_id=commit.value))

"""Process-wide registry of repository initializations.

Maps each ``RepositoryTarget`` to the single task that initializes its
working copy:

    probe branch -> clone resolved ref -> create branch if missing -> checkout

``ensure_initialized`` is a plain (non-async) method: the lookup and the
insert happen without a suspension point in between, so concurrent callers
on the event loop can never start two clones of the same target. Entries are
never evicted; the registry lives as long as the process.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

from relman.core.result import Err, Ok, Result
from relman.git.vcs import VersionControl, short_ref
from relman.output.console import ConsoleProtocol, Style
from relman.platform.files import scratch_dir
from relman.repo.errors import InitError, NotInitializedError, RepositoryAccessError
from relman.repo.handle import RepositoryHandle
from relman.repo.resolver import BranchResolver
from relman.repo.target import RepositoryTarget

__all__ = ["InitResult", "RepositoryRegistry"]

type InitResult = Result[RepositoryHandle, InitError]


class RepositoryRegistry:
    """Target -> initialization task map with insert-if-absent semantics."""

    def __init__(
        self,
        vcs: VersionControl,
        *,
        console: ConsoleProtocol,
        resolver: BranchResolver | None = None,
        scratch_dir_factory: Callable[[str], Path] = scratch_dir,
    ) -> None:
        self._vcs = vcs
        self._console = console
        self._resolver = resolver or BranchResolver(vcs)
        self._scratch_dir_factory = scratch_dir_factory
        self._tasks: dict[RepositoryTarget, asyncio.Task[InitResult]] = {}

    def ensure_initialized(self, target: RepositoryTarget) -> asyncio.Task[InitResult]:
        """Return the target's initialization task, starting it if needed.

        Must be called from a running event loop.
        """
        task = self._tasks.get(target)
        if task is None:
            task = asyncio.create_task(self._initialize(target), name=f"init {target}")
            self._tasks[target] = task
        return task

    def get(self, target: RepositoryTarget) -> Result[asyncio.Task[InitResult], NotInitializedError]:
        task = self._tasks.get(target)
        if task is None:
            return Err(NotInitializedError(target=str(target)))
        return Ok(task)

    async def handle(
        self, target: RepositoryTarget
    ) -> Result[RepositoryHandle, NotInitializedError | RepositoryAccessError]:
        """Await the target's working copy; never starts an initialization."""
        task = self.get(target)
        if isinstance(task, Err):
            return task
        return await asyncio.shield(task.value)

    def targets(self) -> list[RepositoryTarget]:
        return list(self._tasks)

    async def _initialize(self, target: RepositoryTarget) -> InitResult:
        probe = await self._resolver.probe_branch(target)
        if isinstance(probe, Err):
            return probe
        missing = probe.value.missing

        ref = await self._resolver.resolve_initial_ref(target)
        if isinstance(ref, Err):
            return ref

        try:
            destination = self._scratch_dir_factory(target.directory_prefix)
        except OSError as e:
            return Err(_access_error(target, "workdir", str(e)))

        self._console.print(f"git clone --branch {short_ref(ref.value)} {target.remote_url}", Style.DIM)
        cloned = await self._vcs.clone(target.remote_url, ref.value, destination, target.credentials)
        if isinstance(cloned, Err):
            return Err(_access_error(target, "clone", cloned.error.message))
        self._console.info(f"cloned {target.remote_url} in {destination}")

        working_copy = cloned.value
        if missing:
            self._console.warning(
                f"{target.branch} not found on {target.slug}; creating it from {target.default_branch}"
            )
            self._console.print(f"git branch {target.branch}", Style.DIM)
            created = await self._vcs.create_local_branch(working_copy, target.branch)
            if isinstance(created, Err):
                return Err(_access_error(target, "branch", created.error.message))

        self._console.print(f"git checkout {target.branch}", Style.DIM)
        checked_out = await self._vcs.checkout(working_copy, target.branch)
        if isinstance(checked_out, Err):
            return Err(_access_error(target, "checkout", checked_out.error.message))

        return Ok(RepositoryHandle(target=target, working_copy=working_copy, branch_created=missing))


def _access_error(target: RepositoryTarget, operation: str, message: str) -> RepositoryAccessError:
    return RepositoryAccessError(target=str(target), operation=operation, message=message)

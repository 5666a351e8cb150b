"""Tests for relman.platform.process module."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

from relman.core.result import Err, Ok
from relman.platform.process import MASK, ProcessError, redact, run


class TestProcessError:
    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRedact:
    def test_masks_every_occurrence(self) -> None:
        assert redact("a s3cr3t b s3cr3t", ["s3cr3t"]) == f"a {MASK} b {MASK}"

    def test_empty_secret_ignored(self) -> None:
        assert redact("text", ["", "x"]) == "te" + MASK + "t"


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = asyncio.run(run([sys.executable, "-c", "print('hello')"], cwd=tmp_path))

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = asyncio.run(
            run(
                [sys.executable, "-c", "import sys; sys.stderr.write('error msg'); sys.exit(42)"],
                cwd=tmp_path,
            )
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert "error msg" in result.error.stderr

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = asyncio.run(run(["nonexistent_command_12345"], cwd=tmp_path))

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert len(result.error.stderr) > 0

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "marker.txt").write_text("content")

        result = asyncio.run(
            run([sys.executable, "-c", "import os; print(os.listdir('.'))"], cwd=tmp_path)
        )

        assert isinstance(result, Ok)
        assert "marker.txt" in result.value

    def test_secrets_masked_in_command_and_output(self, tmp_path: Path) -> None:
        script = "import sys; print('token=tok123'); sys.stderr.write('bad tok123'); sys.exit(1)"

        result = asyncio.run(
            run([sys.executable, "-c", script, "tok123"], cwd=tmp_path, secrets=("tok123",))
        )

        assert isinstance(result, Err)
        assert "tok123" not in result.error.stdout
        assert "tok123" not in result.error.stderr
        assert "tok123" not in " ".join(result.error.command)
        assert MASK in result.error.command[-1]

    def test_timeout(self, tmp_path: Path) -> None:
        result = asyncio.run(
            run([sys.executable, "-c", "import time; time.sleep(30)"], cwd=tmp_path, timeout=0.5)
        )

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr

    def test_concurrent_commands_overlap(self, tmp_path: Path) -> None:
        async def scenario() -> float:
            loop = asyncio.get_running_loop()
            start = loop.time()
            cmd = [sys.executable, "-c", "import time; time.sleep(1)"]
            results = await asyncio.gather(run(cmd, cwd=tmp_path), run(cmd, cwd=tmp_path))
            assert all(isinstance(r, Ok) for r in results)
            return loop.time() - start

        assert asyncio.run(scenario()) < 1.9

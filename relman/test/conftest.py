"""Shared fixtures."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from pathlib import Path

import pytest

from relman.output.console import MockConsole
from relman.test.fakes import FakeVersionControl


@pytest.fixture
def fake_vcs() -> FakeVersionControl:
    return FakeVersionControl()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def scratch(tmp_path: Path) -> Callable[[str], Path]:
    """Scratch directory factory rooted in tmp_path (no atexit hooks)."""
    counter = itertools.count()

    def make(prefix: str) -> Path:
        path = tmp_path / f"{prefix}{next(counter)}"
        path.mkdir(parents=True)
        return path

    return make

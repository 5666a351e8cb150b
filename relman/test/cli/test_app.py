from __future__ import annotations

import os
from pathlib import Path

import pytest
import typer

from relman import __version__
from relman.core.config import CONFIG_ENV_VAR
from relman.core.errors import ErrorCode


def test_version_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    from relman.cli.app import _main

    with pytest.raises(typer.Exit) as exc:
        _main(version=True, config=None)

    assert exc.value.exit_code == 0
    assert capsys.readouterr().out.strip() == __version__


def test_config_must_be_a_file(tmp_path: Path) -> None:
    from relman.cli.app import _main

    with pytest.raises(typer.Exit) as exc:
        _main(version=False, config=tmp_path / "missing.toml")

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)


def test_config_sets_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from relman.cli.app import _main

    monkeypatch.setenv(CONFIG_ENV_VAR, "unset")
    path = tmp_path / "relman.toml"
    path.write_text("", encoding="utf-8")

    _main(version=False, config=path)

    assert os.environ[CONFIG_ENV_VAR] == str(path)


def test_build_context_rejects_invalid_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from relman.cli.context import build_context

    path = tmp_path / "relman.toml"
    path.write_text("[git\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    with pytest.raises(typer.Exit) as exc:
        build_context()

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)


def test_build_context_loads_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from relman.cli.context import build_context

    path = tmp_path / "relman.toml"
    path.write_text("[git]\ntimeout = 12\nnetwork_timeout = 99\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    ctx = build_context()

    assert ctx.config_path == path
    git = ctx.git()
    assert git.timeout == 12.0
    assert git.network_timeout == 99.0

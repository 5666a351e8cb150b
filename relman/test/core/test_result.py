"""Tests for relman.core.result module."""

from __future__ import annotations

import pytest

from relman.core.result import Err, Ok, Result


class TestOk:
    def test_unwrap_returns_value(self) -> None:
        assert Ok(42).unwrap() == 42

    def test_repr(self) -> None:
        assert repr(Ok("x")) == "Ok('x')"


class TestErr:
    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="boom"):
            Err("boom").unwrap()

    def test_frozen(self) -> None:
        err = Err("boom")
        with pytest.raises(AttributeError):
            err.error = "other"  # type: ignore[misc]


def test_pattern_matching() -> None:
    def describe(result: Result[int, str]) -> str:
        match result:
            case Ok(value):
                return f"value {value}"
            case Err(error):
                return f"error {error}"

    assert describe(Ok(1)) == "value 1"
    assert describe(Err("x")) == "error x"

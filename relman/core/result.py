"""Result type for explicit error handling.

Every fallible operation in relman returns ``Ok(value)`` or ``Err(error)``
instead of raising. Callers narrow with ``isinstance`` or pattern matching:

    match parse_github_reference("snowdrop/bom/sb-2.7.x", token=token):
        case Ok(target):
            console.print(target.remote_url)
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Err", "Ok", "Result"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome.

    Attributes:
        value: The success value.
    """

    value: T

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome.

    Attributes:
        error: The error payload (usually a frozen dataclass).
    """

    error: E

    def unwrap(self) -> None:
        """Raise, since there is no value.

        Raises:
            ValueError: Always, carrying the error.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]

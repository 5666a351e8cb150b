"""Platform abstraction layer."""

from .files import atomic_write_text, scratch_dir
from .process import ProcessError, redact, run

__all__ = [
    # files
    "atomic_write_text",
    "scratch_dir",
    # process
    "ProcessError",
    "redact",
    "run",
]

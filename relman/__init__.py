"""relman: release-engineering helpers for versioned repositories."""

__version__ = "0.1.0"

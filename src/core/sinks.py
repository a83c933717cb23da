"""Output sinks for loggers under test."""

from __future__ import annotations

__all__ = ["DiscardSink"]


class DiscardSink:
    """Writable destination that accepts text or bytes and drops them.

    It keeps no state, so concurrent writers never contend on it and only
    the library's own buffering and locking is measured.
    """

    def write(self, data: str | bytes) -> int:
        return len(data)

    def flush(self) -> None:
        pass

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False

    def close(self) -> None:
        pass

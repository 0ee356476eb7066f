"""Elapsed-time clock interface."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ElapsedClock(Protocol):
    """Protocol for the clock that counts seconds while a session is open.

    The clock is either idle or running. While running it adds exactly one
    second per tick to ``elapsed_seconds``.
    """

    @property
    def elapsed_seconds(self) -> int:
        """Seconds counted since the last reset or seed."""
        ...

    @property
    def is_running(self) -> bool:
        """Whether the periodic tick is armed."""
        ...

    def start(self) -> None:
        """Arm the periodic tick. Starting a running clock does nothing."""
        ...

    def stop(self) -> None:
        """Disarm the periodic tick. Stopping an idle clock does nothing."""
        ...

    def reset(self, seconds: int = 0) -> None:
        """Set the elapsed counter without changing the running state."""
        ...

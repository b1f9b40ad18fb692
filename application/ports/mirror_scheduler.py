"""Port for scheduling mirror refreshes (abstraction from Temporal)."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class MirrorScheduler(Protocol):
    """Abstract port for running the refresh job on a timer.

    Implementations own the timer and invoke the refresh entry point; the
    refresh itself knows nothing about how it is triggered.
    """

    @abstractmethod
    async def ensure_refresh_schedule(self) -> str:
        """Make sure the periodic refresh is registered.

        Returns:
            Identifier of the schedule

        """
        ...

    @abstractmethod
    async def trigger_refresh(self) -> str:
        """Start one refresh run immediately.

        Returns:
            Identifier of the started run

        """
        ...

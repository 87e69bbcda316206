"""
Protocol definitions for collaborators of the narrative engine.

The engine talks to persistence through these interfaces only, so tests can
inject in-memory or failing implementations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from docket.models.game import HistoryEntry


@runtime_checkable
class HistoryRecorder(Protocol):
    """Protocol for persisting and retrieving play history.

    Implementations are best-effort: the engine never waits on append()
    and never lets its failures reach the player.

    Example implementations:
        - InMemoryHistoryRecorder: process-local lists, for tests and demos
        - JsonlHistoryRecorder: append-only JSON Lines files on disk
    """

    async def append(self, entry: "HistoryEntry") -> None:
        """Persist one history entry.

        Args:
            entry: The scene/choice record to store
        """
        ...

    async def load(self, user_id: str) -> list["HistoryEntry"]:
        """Load a user's previously appended entries.

        Args:
            user_id: The user whose history to load

        Returns:
            Entries ordered by timestamp, oldest first
        """
        ...

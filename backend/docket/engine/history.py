"""
Play history persistence.

Recorders store HistoryEntry records outside the engine. The
HistoryDispatcher hands entries to a recorder fire-and-forget: the
engine's choose() returns without waiting, and recorder failures are
logged and dropped.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import threading
import uuid
from pathlib import Path

from docket.engine.protocols import HistoryRecorder
from docket.models.game import HistoryEntry

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def resolve_user_id(user_id: str | None = None) -> str:
    """Use the externally supplied identity, or a random local one."""
    if user_id:
        return user_id
    return str(uuid.uuid4())


class InMemoryHistoryRecorder:
    """Keeps history in process memory, per user and as a shared feed."""

    def __init__(self):
        self.public: list[HistoryEntry] = []
        self.by_user: dict[str, list[HistoryEntry]] = {}

    async def append(self, entry: HistoryEntry) -> None:
        self.public.append(entry)
        self.by_user.setdefault(entry.user_id, []).append(entry)

    async def load(self, user_id: str) -> list[HistoryEntry]:
        return sorted(self.by_user.get(user_id, []), key=lambda e: e.timestamp)

    async def load_public(self) -> list[HistoryEntry]:
        return sorted(self.public, key=lambda e: e.timestamp)


class JsonlHistoryRecorder:
    """Stores history as JSON Lines files.

    Layout under the base directory:
        <app_id>/public.jsonl            every entry, from every user
        <app_id>/users/<user_id>.jsonl   one user's own entries
    """

    def __init__(self, base_dir: str | Path, app_id: str):
        self.base_dir = Path(base_dir)
        self.app_id = app_id
        self._lock = threading.Lock()

    @property
    def app_dir(self) -> Path:
        return self.base_dir / _UNSAFE_FILENAME_CHARS.sub("_", self.app_id)

    @property
    def public_file(self) -> Path:
        return self.app_dir / "public.jsonl"

    def user_file(self, user_id: str) -> Path:
        safe_id = _UNSAFE_FILENAME_CHARS.sub("_", user_id)
        return self.app_dir / "users" / f"{safe_id}.jsonl"

    async def append(self, entry: HistoryEntry) -> None:
        await asyncio.to_thread(self._write, entry)

    async def load(self, user_id: str) -> list[HistoryEntry]:
        entries = await asyncio.to_thread(self._read, self.user_file(user_id))
        return sorted(entries, key=lambda e: e.timestamp)

    async def load_public(self) -> list[HistoryEntry]:
        entries = await asyncio.to_thread(self._read, self.public_file)
        return sorted(entries, key=lambda e: e.timestamp)

    def _write(self, entry: HistoryEntry) -> None:
        line = entry.model_dump_json() + "\n"
        user_file = self.user_file(entry.user_id)
        with self._lock:
            user_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.public_file, "a", encoding="utf-8") as f:
                f.write(line)
            with open(user_file, "a", encoding="utf-8") as f:
                f.write(line)

    def _read(self, path: Path) -> list[HistoryEntry]:
        if not path.exists():
            return []

        entries = []
        with open(path, encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(HistoryEntry.model_validate(json.loads(line)))
                except ValueError:
                    logger.warning(f"Skipping malformed history line {path}:{line_no}")
        return entries


class HistoryDispatcher:
    """Hands history entries to a recorder without blocking the caller.

    Inside a running event loop each append becomes an asyncio task;
    without one it runs on a daemon thread. Either way dispatch() returns
    immediately and ordering between writes is not guaranteed.
    """

    def __init__(self, recorder: HistoryRecorder):
        self.recorder = recorder
        self._pending: set[asyncio.Task] = set()
        self._threads: list[threading.Thread] = []

    @property
    def pending_count(self) -> int:
        alive = [t for t in self._threads if t.is_alive()]
        return len(self._pending) + len(alive)

    def dispatch(self, entry: HistoryEntry) -> None:
        """Schedule an append and return immediately."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self._append(entry))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            return

        self._threads = [t for t in self._threads if t.is_alive()]
        thread = threading.Thread(
            target=asyncio.run,
            args=(self._append(entry),),
            name="docket-history",
            daemon=True,
        )
        self._threads.append(thread)
        thread.start()

    async def drain(self) -> None:
        """Wait for appends dispatched so far (shutdown and tests)."""
        loop = asyncio.get_running_loop()
        tasks = [t for t in self._pending if t.get_loop() is loop]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        for thread in list(self._threads):
            await asyncio.to_thread(thread.join)
        self._threads = [t for t in self._threads if t.is_alive()]

    async def _append(self, entry: HistoryEntry) -> None:
        try:
            await self.recorder.append(entry)
        except Exception:
            logger.exception(
                f"Failed to persist history entry for user {entry.user_id}"
            )


async def load_history(recorder: HistoryRecorder, user_id: str) -> list[HistoryEntry]:
    """Load a user's history, treating any failure as "no history"."""
    try:
        return await recorder.load(user_id)
    except Exception:
        logger.exception(f"Failed to load history for user {user_id}")
        return []

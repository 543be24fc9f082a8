"""
Sync Session - the client's view of the registry.

Holds one ordered snapshot that is replaced wholesale on every fetch.
Reorders are applied optimistically and reconciled with the server;
add/edit/delete wait for the server and then re-fetch.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from launchpad.core.exceptions import ValidationError
from launchpad.presentation.icons import resolve_icon
from launchpad.sync.client import LauncherClient, RequestFailedError

logger = logging.getLogger(__name__)

NOTICE_TTL_SECONDS = 3.0


class SessionState(Enum):
    """Lifecycle of the session."""

    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    MUTATING = "mutating"
    REVERTING = "reverting"


@dataclass
class Notice:
    """Transient user-facing message."""

    level: str
    message: str
    created_at: float = field(default_factory=time.monotonic)

    def expired(self, now: float, ttl: float = NOTICE_TTL_SECONDS) -> bool:
        return now - self.created_at >= ttl


class SyncSession:
    """
    Client-side snapshot with optimistic reordering.

    Usage:
        session = SyncSession(LauncherClient(base_url))
        await session.load()
        task = session.move("crm", "home")
        await task
    """

    def __init__(
        self,
        client: LauncherClient,
        *,
        notice_ttl: float = NOTICE_TTL_SECONDS,
        on_change: Callable[[list[dict[str, Any]]], None] | None = None,
    ):
        self._client = client
        self._notice_ttl = notice_ttl
        self._on_change = on_change
        self._snapshot: list[dict[str, Any]] = []
        # Last order the server is known to hold
        self._committed: list[dict[str, Any]] = []
        self._reorder_lock = asyncio.Lock()
        self._gesture = 0
        # Bumped whenever a fetched snapshot replaces the display
        self._generation = 0
        self.state = SessionState.IDLE
        self.pending: set[str] = set()
        self.notices: list[Notice] = []

    @property
    def snapshot(self) -> list[dict[str, Any]]:
        """Current display order (a copy)."""
        return list(self._snapshot)

    @property
    def ids(self) -> list[str]:
        return [r["id"] for r in self._snapshot]

    def _replace(self, records: list[dict[str, Any]]) -> None:
        self._snapshot = list(records)
        if self._on_change is not None:
            self._on_change(self.snapshot)

    def notify(self, level: str, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        return notice

    def active_notices(self, now: float | None = None) -> list[Notice]:
        """Notices younger than the TTL; expired ones are dropped."""
        now = time.monotonic() if now is None else now
        self.notices = [n for n in self.notices if not n.expired(now, self._notice_ttl)]
        return list(self.notices)

    async def load(self) -> list[dict[str, Any]]:
        """
        Fetch the authoritative snapshot.

        On failure the snapshot is emptied and an error notice raised.
        """
        self.state = SessionState.FETCHING
        try:
            records = await self._client.list_apps()
        except RequestFailedError as e:
            logger.warning(f"Initial fetch failed: {e}")
            self.notify("error", "Failed to load apps")
            self._committed = []
            self._replace([])
        else:
            self._generation += 1
            self._committed = list(records)
            self._replace(records)
        self._settle()
        return self.snapshot

    async def _refetch(self) -> bool:
        """Re-fetch without clearing the current snapshot on failure."""
        try:
            records = await self._client.list_apps()
        except RequestFailedError as e:
            logger.warning(f"Re-fetch failed, keeping current snapshot: {e}")
            return False
        self._generation += 1
        self._committed = list(records)
        self._replace(records)
        return True

    def _settle(self) -> None:
        self.state = SessionState.MUTATING if self.pending else SessionState.READY

    def filter(self, query: str) -> list[dict[str, Any]]:
        """Case-insensitive name/description search over the snapshot."""
        needle = (query or "").strip().lower()
        if not needle:
            return self.snapshot
        return [
            r
            for r in self._snapshot
            if needle in (r.get("name") or "").lower()
            or needle in (r.get("description") or "").lower()
        ]

    @staticmethod
    def icon_for(record: dict[str, Any]) -> str:
        return resolve_icon(record.get("iconName"))

    def reorder(self, ordered_ids: list[str]) -> asyncio.Task:
        """
        Apply a new order immediately and commit it in the background.

        Must be called from a running event loop. The returned task
        completes once the server has accepted or rejected the order.

        Raises:
            ValidationError: If ordered_ids is not a permutation of the snapshot
        """
        by_id = {r["id"]: r for r in self._snapshot}
        if len(ordered_ids) != len(by_id) or set(ordered_ids) != set(by_id):
            raise ValidationError(
                "Order must contain every displayed id exactly once",
                field="order",
            )

        self._gesture += 1
        gesture = self._gesture
        optimistic = [{**by_id[app_id], "sortOrder": pos} for pos, app_id in enumerate(ordered_ids)]
        self._replace(optimistic)
        self._settle()
        return asyncio.get_running_loop().create_task(
            self._commit_reorder(list(ordered_ids), optimistic, gesture, self._generation)
        )

    def move(self, active_id: str, over_id: str) -> asyncio.Task | None:
        """Drag ``active_id`` onto ``over_id``'s slot. No-op when they match."""
        if active_id == over_id:
            return None
        ids = self.ids
        if active_id not in ids or over_id not in ids:
            return None
        target = ids.index(over_id)
        ids.remove(active_id)
        ids.insert(target, active_id)
        return self.reorder(ids)

    async def _commit_reorder(
        self, ordered_ids: list[str], optimistic: list[dict[str, Any]], gesture: int, generation: int
    ) -> bool:
        async with self._reorder_lock:
            try:
                await self._client.reorder(ordered_ids)
            except RequestFailedError as e:
                logger.warning(f"Reorder rejected, reverting: {e}")
                self.state = SessionState.REVERTING
                self._replace(self._committed)
                await self._refetch()
                self.notify("error", "Failed to save new order")
                self._settle()
                return False

            if generation != self._generation:
                # The display was re-fetched mid-flight; the optimistic list is stale.
                # A newer gesture, if any, reconciles on its own ack.
                if gesture == self._gesture and not await self._refetch():
                    self.notify("error", "Saved, but failed to refresh apps")
                return True

            self._committed = optimistic
            # A failed earlier gesture may have reverted the display
            if gesture == self._gesture:
                self._replace(optimistic)
            return True

    async def _mutate(self, key: str, action: Callable[[], Any], failure: str, *, tolerate_404: bool = False) -> bool:
        self.pending.add(key)
        self.state = SessionState.MUTATING
        try:
            await action()
        except RequestFailedError as e:
            if not (tolerate_404 and e.is_not_found):
                logger.warning(f"{failure}: {e}")
                self.notify("error", f"{failure}: {e.message}")
                self.pending.discard(key)
                self._settle()
                return False
        self.pending.discard(key)
        if not await self._refetch():
            self.notify("error", "Saved, but failed to refresh apps")
        self._settle()
        return True

    async def create(self, record: dict[str, Any]) -> bool:
        """Add an application; True on success."""
        key = f"create:{record.get('id') or record.get('name')}"
        return await self._mutate(key, lambda: self._client.create_app(record), "Failed to add app")

    async def update(self, app_id: str, fields: dict[str, Any]) -> bool:
        """Edit an application; True on success."""
        return await self._mutate(
            f"update:{app_id}", lambda: self._client.update_app(app_id, fields), "Failed to save app"
        )

    async def delete(self, app_id: str) -> bool:
        """Delete an application; an already-missing id counts as deleted."""
        return await self._mutate(
            f"delete:{app_id}",
            lambda: self._client.delete_app(app_id),
            "Failed to delete app",
            tolerate_404=True,
        )

"""
Deferred group list refresh.

After a group is created the external automation may finish provisioning
out of band. A one-shot timer re-reads the organization's groups after a
fixed delay and hands the fresh list to the waiting listeners. This is a
fallback for the provisioning callback, not a guarantee: a group can stay
"Creando..." forever.

Refreshes are coalesced per organization. A creation while a refresh is
pending restarts the delay and joins its listeners to the same batch, so one
timer thread serves a burst of creations. A superseded timer that fires
anyway finds its generation outdated and does nothing.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from django.conf import settings
from django.db import connection

from apps.core.exceptions import PersistenceError
from apps.core.gateway import PersistenceGateway
from apps.core.logging import get_logger

logger = get_logger(__name__)

GroupListener = Callable[[list[Any]], Any]
TimerFactory = Callable[[float, Callable[..., None], tuple], threading.Timer]


def _default_timer(interval: float, function: Callable[..., None], args: tuple) -> threading.Timer:
    timer = threading.Timer(interval, function, args=args)
    timer.daemon = True
    return timer


@dataclass
class PendingRefresh:
    """The one outstanding refresh of an organization."""

    generation: int
    timer: threading.Timer
    listeners: list[GroupListener] = field(default_factory=list)


class GroupRefreshScheduler:
    """Schedules coalesced one-shot re-fetches of an organization's group list."""

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        delay_seconds: float | None = None,
        timer_factory: TimerFactory = _default_timer,
    ):
        self.gateway = gateway or PersistenceGateway()
        self.delay_seconds = delay_seconds if delay_seconds is not None else settings.GROUP_REFRESH_DELAY_SECONDS
        self.timer_factory = timer_factory
        self._lock = threading.Lock()
        self._generation = 0
        self._pending: dict[str, PendingRefresh] = {}

    def schedule(self, organization_id: Any, listener: GroupListener) -> threading.Timer:
        """
        Start (or restart) the organization's refresh timer and return it.

        Listeners already waiting on a pending refresh are carried over.
        """
        key = str(organization_id)
        with self._lock:
            self._generation += 1
            previous = self._pending.get(key)
            listeners = [*previous.listeners, listener] if previous else [listener]
            if previous is not None:
                previous.timer.cancel()
            timer = self.timer_factory(self.delay_seconds, self._fire, (organization_id, self._generation))
            self._pending[key] = PendingRefresh(generation=self._generation, timer=timer, listeners=listeners)

        timer.start()
        logger.debug(
            "group_refresh_scheduled",
            organization_id=key,
            delay_seconds=self.delay_seconds,
            listeners=len(listeners),
        )
        return timer

    def pending_count(self) -> int:
        """Organizations with a refresh still waiting to fire."""
        with self._lock:
            return len(self._pending)

    def refresh_now(self, organization_id: Any, *listeners: GroupListener) -> bool:
        """
        Re-read the group list once and push it to every listener.

        Returns:
            False if the list could not be read; no listener is called
        """
        try:
            groups = self.gateway.select(
                "grupos",
                {"organization_id": organization_id},
                order=["-created_at"],
            )
        except PersistenceError as e:
            logger.warning("group_refresh_failed", organization_id=str(organization_id), error=str(e))
            return False

        for listener in listeners:
            listener(list(groups))
        return True

    def _take(self, organization_id: Any, generation: int) -> list[GroupListener] | None:
        key = str(organization_id)
        with self._lock:
            pending = self._pending.get(key)
            if pending is None or pending.generation != generation:
                return None
            del self._pending[key]
            return pending.listeners

    def _fire(self, organization_id: Any, generation: int) -> None:
        listeners = self._take(organization_id, generation)
        if listeners is None:
            logger.debug("group_refresh_superseded", organization_id=str(organization_id), generation=generation)
            return

        # Runs on the timer thread, which owns its own DB connection
        try:
            self.refresh_now(organization_id, *listeners)
        finally:
            connection.close()


_scheduler: GroupRefreshScheduler | None = None
_scheduler_lock = threading.Lock()


def get_refresh_scheduler() -> GroupRefreshScheduler:
    """Process-wide scheduler so refreshes coalesce across requests."""
    global _scheduler
    with _scheduler_lock:
        if _scheduler is None:
            _scheduler = GroupRefreshScheduler()
        return _scheduler


def log_pending_groups(organization_id: Any) -> GroupListener:
    """Listener for API-triggered refreshes: records how many groups remain pending."""

    def listener(groups: list[Any]) -> None:
        pending = sum(1 for g in groups if g.is_pending)
        logger.info(
            "group_refresh_completed",
            organization_id=str(organization_id),
            total=len(groups),
            pending=pending,
        )

    return listener

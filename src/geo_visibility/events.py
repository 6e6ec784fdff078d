"""Outbound events emitted after a check cycle."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from geo_visibility.data import Citation, LostQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CitationsDiscovered:
    """New citation rows were inserted for a site."""

    site_id: str
    domain: str
    citations: tuple[Citation, ...] = ()


@dataclass(frozen=True)
class RemediationRequested:
    """Ask the content component to write fix pages for lost queries."""

    site_id: str
    domain: str
    lost_queries: tuple[LostQuery, ...] = ()
    max_pages: int = 0


@dataclass(frozen=True)
class VisibilityDropDetected:
    """Queries won fell sharply between the two most recent snapshots."""

    site_id: str
    domain: str
    previous_won: int
    current_won: int
    drop: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "drop", self.previous_won - self.current_won)


CheckEvent = CitationsDiscovered | RemediationRequested | VisibilityDropDetected


class EventSink(Protocol):
    """Destination for check-cycle events."""

    async def publish(self, event: CheckEvent) -> None:
        """Deliver one event. May raise; callers log and carry on."""
        ...


class QueueEventSink:
    """Puts events on an ``asyncio.Queue`` for a consumer task to drain."""

    def __init__(self, queue: asyncio.Queue[CheckEvent] | None = None) -> None:
        self.queue: asyncio.Queue[CheckEvent] = queue if queue is not None else asyncio.Queue()

    async def publish(self, event: CheckEvent) -> None:
        await self.queue.put(event)

    def drain(self) -> list[CheckEvent]:
        """Remove and return everything currently queued."""
        events: list[CheckEvent] = []
        while not self.queue.empty():
            events.append(self.queue.get_nowait())
        return events


class LoggingEventSink:
    """Logs events and drops them."""

    async def publish(self, event: CheckEvent) -> None:
        if isinstance(event, CitationsDiscovered):
            logger.info(
                f"[{event.site_id}] {len(event.citations)} new citation(s) for {event.domain}"
            )
        elif isinstance(event, RemediationRequested):
            logger.info(
                f"[{event.site_id}] remediation requested for {event.domain}: "
                f"{len(event.lost_queries)} lost queries, up to {event.max_pages} pages"
            )
        elif isinstance(event, VisibilityDropDetected):
            logger.warning(
                f"[{event.site_id}] visibility drop for {event.domain}: "
                f"{event.previous_won} -> {event.current_won} queries won"
            )

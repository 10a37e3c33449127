"""
Gateway event descriptors and the event manifest.

Each module listed in :data:`EVENT_MANIFEST` exposes an ``event`` attribute.
Event callbacks receive the running :class:`~pingu_bot.bot.PinguBot` first,
followed by whatever arguments discord.py dispatches for that event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

__all__ = ["EVENT_MANIFEST", "EventCallback", "EventDescriptor"]

EventCallback = Callable[..., Awaitable[None]]


@dataclass(frozen=True, slots=True)
class EventDescriptor:
    """Binds a discord.py event name (without ``on_``) to a callback."""

    name: str
    callback: EventCallback
    once: bool = False


EVENT_MANIFEST: Sequence[Any] = (
    "pingu_bot.events.ready",
    "pingu_bot.events.interaction_create",
)

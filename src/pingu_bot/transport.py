"""Thin subscription layer over :class:`discord.Client`."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List

import discord

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Awaitable[None]]


def default_intents() -> discord.Intents:
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.members = True
    intents.message_content = True
    return intents


@dataclass(slots=True)
class _Subscription:
    handler: EventHandler
    once: bool


class GatewayTransport:
    """
    Own a ``discord.Client`` and let several handlers share one event.

    discord.py calls a single ``on_<event>`` coroutine per event name. The
    first subscription for a name installs a fan-out coroutine on the client
    instance; it awaits each subscriber in registration order. A subscriber
    that raises is reported through ``client.on_error`` and the remaining
    subscribers still run.
    """

    def __init__(self, client: discord.Client | None = None) -> None:
        self.client = client or discord.Client(intents=default_intents())
        self._subscriptions: Dict[str, List[_Subscription]] = {}

    # ------------------------------------------------------------------ #
    # Subscriptions
    # ------------------------------------------------------------------ #
    def on(self, event_name: str, handler: EventHandler) -> None:
        """Run ``handler`` every time ``event_name`` fires."""
        self._subscribe(event_name, handler, once=False)

    def once(self, event_name: str, handler: EventHandler) -> None:
        """Run ``handler`` the next time ``event_name`` fires, then forget it."""
        self._subscribe(event_name, handler, once=True)

    def subscriber_count(self, event_name: str) -> int:
        return len(self._subscriptions.get(event_name, ()))

    def _subscribe(self, event_name: str, handler: EventHandler, *, once: bool) -> None:
        subscribers = self._subscriptions.get(event_name)
        if subscribers is None:
            subscribers = self._subscriptions[event_name] = []
            self._install(event_name)
        subscribers.append(_Subscription(handler, once))

    def _install(self, event_name: str) -> None:
        method = f"on_{event_name}"

        async def _fan_out(*args: Any, **kwargs: Any) -> None:
            await self.emit(event_name, *args, **kwargs)

        _fan_out.__name__ = method
        setattr(self.client, method, _fan_out)

    async def emit(self, event_name: str, *args: Any, **kwargs: Any) -> None:
        """Deliver one event to its subscribers."""

        subscribers = self._subscriptions.get(event_name)
        if not subscribers:
            return

        # Snapshot first so one-shot handlers fire at most once even if the
        # event is re-dispatched while they are still running.
        current = list(subscribers)
        subscribers[:] = [sub for sub in subscribers if not sub.once]

        for sub in current:
            try:
                await sub.handler(*args, **kwargs)
            except Exception:
                await self.client.on_error(f"on_{event_name}", *args, **kwargs)

    # ------------------------------------------------------------------ #
    # Connection
    # ------------------------------------------------------------------ #
    async def login(self, token: str) -> None:
        await self.client.login(token)

    async def connect(self) -> None:
        await self.client.connect()

    async def close(self) -> None:
        if self.client.is_closed():
            return
        logger.info("Closing gateway connection")
        await self.client.close()

    def is_closed(self) -> bool:
        return self.client.is_closed()

    async def change_presence(self, **kwargs: Any) -> None:
        await self.client.change_presence(**kwargs)

    @property
    def latency(self) -> float:
        """Heartbeat round-trip in seconds (``nan`` before the first heartbeat)."""
        return self.client.latency

    @property
    def user(self) -> discord.ClientUser | None:
        return self.client.user

    @property
    def guilds(self):
        return self.client.guilds

    @property
    def users(self):
        return self.client.users


__all__ = ["GatewayTransport", "default_intents"]

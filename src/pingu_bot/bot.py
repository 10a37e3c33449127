"""Bot bootstrap: wires the components together and owns startup/shutdown."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import Any, Awaitable, Callable, Mapping, Sequence

from .cooldowns import CooldownTracker
from .dispatch import Dispatcher
from .errors import StartupError
from .publisher import DEFAULT_API_BASE, CommandPublisher
from .registry import HandlerRegistry
from .transport import GatewayTransport

logger = logging.getLogger(__name__)


class PinguBot:
    """
    Composition root for one bot process.

    Startup runs strictly in order: load commands, load events, publish the
    command catalog, log in, connect. The first failing step aborts startup
    with a :class:`StartupError`.
    """

    def __init__(
        self,
        token: str,
        application_id: str | int,
        *,
        transport: GatewayTransport | None = None,
        registry: HandlerRegistry | None = None,
        cooldowns: CooldownTracker | None = None,
        publisher: CommandPublisher | None = None,
        api_base: str = DEFAULT_API_BASE,
        handler_timeout: float | None = None,
        command_manifest: Mapping[Any, Sequence[Any]] | None = None,
        event_manifest: Sequence[Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._token = token
        self._command_manifest = command_manifest
        self._event_manifest = event_manifest
        self._closing = False

        self.transport = transport or GatewayTransport()
        self.registry = registry or HandlerRegistry(logger=self._log.getChild("registry"))
        self.cooldowns = cooldowns or CooldownTracker(logger=self._log.getChild("cooldowns"))
        self.dispatcher = Dispatcher(
            self.registry,
            self.cooldowns,
            handler_timeout=handler_timeout,
            logger=self._log.getChild("dispatch"),
        )
        self.publisher = publisher or CommandPublisher(
            token,
            application_id,
            api_base=api_base,
            logger=self._log.getChild("publisher"),
        )

    async def start(self) -> None:
        """Run every startup step, then stay connected until closed."""

        self._log.info("Starting Pingu Bot...")

        await self._step("load commands", self._load_commands)
        await self._step("load events", self._load_events)
        await self._step("publish commands", self._publish)
        if self._closing:
            return
        await self._step("login", lambda: self.transport.login(self._token))

        self._log.info("Pingu Bot started successfully!")
        await self._step("connect", self.transport.connect)

    async def close(self) -> None:
        """Disconnect from the gateway. In-flight handlers are not awaited."""

        self._closing = True
        await self.transport.close()

    @property
    def is_closing(self) -> bool:
        return self._closing

    async def _load_commands(self) -> None:
        self.registry.load_commands(self._command_manifest)

    async def _load_events(self) -> None:
        self.registry.load_events(self.transport, self, self._event_manifest)

    async def _publish(self) -> None:
        await self.publisher.publish(self.registry)

    async def _step(self, name: str, action: Callable[[], Awaitable[None]]) -> None:
        try:
            await action()
        except Exception as exc:
            raise StartupError(name, exc) from exc


def _log_async_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    message = context.get("message", "Unhandled asynchronous error")
    if exc is not None:
        logger.error("Unhandled asynchronous error: %s", message, exc_info=exc)
    else:
        logger.error("Unhandled asynchronous error: %s", message)


async def serve(bot: PinguBot) -> int:
    """
    Run ``bot`` until it disconnects or a termination signal arrives.

    Returns the process exit status: ``0`` for a clean or signal-triggered
    shutdown, ``1`` when startup failed.
    """

    loop = asyncio.get_running_loop()
    loop.set_exception_handler(_log_async_exception)
    pending: set[asyncio.Task] = set()

    def _on_signal(sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down gracefully...", sig.name)
        task = loop.create_task(bot.close())
        pending.add(task)
        task.add_done_callback(pending.discard)

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
        except (NotImplementedError, RuntimeError):
            # Windows event loops cannot install signal handlers.
            pass

    try:
        await bot.start()
    except StartupError as exc:
        logger.error("Failed to start bot: %s", exc, exc_info=exc.__cause__)
        await bot.close()
        return 1
    finally:
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    await bot.close()
    return 0


def run() -> None:
    """Start the bot using configuration from the environment."""

    from pingu_bot.config import core

    bot = PinguBot(
        core.DISCORD_TOKEN,
        core.DISCORD_CLIENT_ID,
        api_base=core.API_BASE,
        handler_timeout=core.HANDLER_TIMEOUT,
    )

    try:
        status = asyncio.run(serve(bot))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        status = 0
    except Exception:
        logger.exception("Fatal error, exiting")
        status = 1

    sys.exit(status)


__all__ = ["PinguBot", "run", "serve"]

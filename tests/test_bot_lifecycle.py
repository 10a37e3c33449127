import asyncio
import logging
import os
import signal
import sys
from types import SimpleNamespace

import pytest

from pingu_bot import bot as bot_module
from pingu_bot.bot import PinguBot, serve
from pingu_bot.commands import CommandCategory
from pingu_bot.errors import PublishError, StartupError


class FakeTransport:
    def __init__(self, log, *, connect_error=None):
        self.log = log
        self.subscriptions = []
        self.closed = False
        self._connect_error = connect_error

    def on(self, name, handler):
        self.subscriptions.append(("on", name))

    def once(self, name, handler):
        self.subscriptions.append(("once", name))

    async def login(self, token):
        self.log.append(("login", token))

    async def connect(self):
        self.log.append("connect")
        if self._connect_error is not None:
            raise self._connect_error

    async def close(self):
        self.log.append("close")
        self.closed = True


class FakePublisher:
    def __init__(self, log, *, error=None, on_publish=None):
        self.log = log
        self.published = None
        self._error = error
        self._on_publish = on_publish

    async def publish(self, commands):
        self.published = [cmd.name for cmd in commands]
        self.log.append("publish")
        if self._on_publish is not None:
            await self._on_publish()
        if self._error is not None:
            raise self._error
        return self.published


def _bot(log, **kwargs):
    transport = kwargs.pop("transport", None) or FakeTransport(log)
    publisher = kwargs.pop("publisher", None) or FakePublisher(log)
    return PinguBot("token", 42, transport=transport, publisher=publisher, **kwargs)


def test_startup_runs_steps_in_order():
    log = []
    bot = _bot(log)

    asyncio.run(bot.start())

    assert log == ["publish", ("login", "token"), "connect"]
    assert set(bot.publisher.published) == {"ping", "help"}
    assert bot.transport.subscriptions == [("once", "ready"), ("on", "interaction")]


def test_publish_sees_exactly_the_registered_commands():
    log = []
    bot = _bot(log, command_manifest={CommandCategory.UTILITY: ["pingu_bot.commands.utility.ping"]})

    asyncio.run(bot.start())

    assert bot.publisher.published == bot.registry.names() == ["ping"]


def test_publish_failure_aborts_before_login():
    log = []
    bot = _bot(log, publisher=FakePublisher(log, error=PublishError("rejected")))

    with pytest.raises(StartupError) as excinfo:
        asyncio.run(bot.start())

    assert excinfo.value.step == "publish commands"
    assert isinstance(excinfo.value.__cause__, PublishError)
    assert log == ["publish"]


def test_command_load_failure_aborts_startup():
    log = []
    bot = _bot(log, command_manifest={CommandCategory.FUN: ["pingu_bot.commands.fun.missing"]})

    with pytest.raises(StartupError) as excinfo:
        asyncio.run(bot.start())

    assert excinfo.value.step == "load commands"
    assert log == []


def test_serve_returns_one_on_startup_failure(caplog):
    log = []
    bot = _bot(log, publisher=FakePublisher(log, error=PublishError("rejected")))

    with caplog.at_level(logging.ERROR):
        status = asyncio.run(serve(bot))

    assert status == 1
    assert "Failed to start bot" in caplog.text
    assert log[-1] == "close"


def test_serve_returns_zero_after_clean_disconnect():
    log = []
    bot = _bot(log)

    assert asyncio.run(serve(bot)) == 0
    assert log[-1] == "close"


def test_gateway_failure_is_fatal():
    log = []
    transport = FakeTransport(log, connect_error=ConnectionError("gateway down"))
    bot = _bot(log, transport=transport)

    assert asyncio.run(serve(bot)) == 1


def test_close_during_startup_skips_login():
    log = []
    holder = {}

    async def close_midway():
        await holder["bot"].close()

    bot = _bot(log, publisher=FakePublisher(log, on_publish=close_midway))
    holder["bot"] = bot

    asyncio.run(bot.start())

    assert ("login", "token") not in log
    assert bot.is_closing


def test_interaction_event_reaches_dispatcher():
    log = []
    bot = _bot(log)
    seen = []

    async def fake_dispatch(interaction):
        seen.append(interaction)

    bot.dispatcher = SimpleNamespace(dispatch=fake_dispatch)
    from pingu_bot.events import interaction_create

    interaction = object()
    asyncio.run(interaction_create.handle(bot, interaction))

    assert seen == [interaction]


def test_run_exits_with_serve_status(monkeypatch):
    async def fake_serve(bot):
        return 1

    monkeypatch.setattr(bot_module, "serve", fake_serve)

    with pytest.raises(SystemExit) as excinfo:
        bot_module.run()

    assert excinfo.value.code == 1


class SignalledTransport(FakeTransport):
    """Raises SIGTERM against this process once connected, then waits to be closed."""

    def __init__(self, log):
        super().__init__(log)
        self._closed = asyncio.Event()

    async def connect(self):
        self.log.append("connect")
        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.wait_for(self._closed.wait(), timeout=5)

    async def close(self):
        await super().close()
        self._closed.set()


@pytest.mark.skipif(sys.platform == "win32", reason="needs loop signal handlers")
def test_sigterm_closes_bot_and_serve_returns_zero(caplog):
    log = []
    bot = _bot(log, transport=SignalledTransport(log))

    with caplog.at_level(logging.INFO, logger="pingu_bot.bot"):
        status = asyncio.run(serve(bot))

    assert status == 0
    assert bot.is_closing
    assert "Received SIGTERM, shutting down gracefully..." in caplog.text
    assert log.index("connect") < log.index("close")


def test_serve_installs_loop_exception_handler():
    log = []
    installed = []

    class InspectingTransport(FakeTransport):
        async def connect(self):
            installed.append(asyncio.get_running_loop().get_exception_handler())

    bot = _bot(log, transport=InspectingTransport(log))

    assert asyncio.run(serve(bot)) == 0
    assert installed == [bot_module._log_async_exception]


def test_async_exception_is_logged_with_traceback(caplog):
    error = RuntimeError("task blew up")

    with caplog.at_level(logging.ERROR, logger="pingu_bot.bot"):
        bot_module._log_async_exception(
            None, {"message": "Task exception was never retrieved", "exception": error}
        )

    record = caplog.records[-1]
    assert record.getMessage() == (
        "Unhandled asynchronous error: Task exception was never retrieved"
    )
    assert record.exc_info[1] is error


def test_async_error_without_exception_is_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="pingu_bot.bot"):
        bot_module._log_async_exception(None, {"message": "Unclosed client session"})

    record = caplog.records[-1]
    assert record.getMessage() == "Unhandled asynchronous error: Unclosed client session"
    assert not record.exc_info

import os, sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

# Add the src/ tree to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Ensure required environment variables for Core()
os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ.setdefault("DISCORD_CLIENT_ID", "123456789")


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self) -> None:
        self.sent = []
        self._done = False

    def is_done(self) -> bool:
        return self._done

    async def send_message(self, content=None, **kwargs):
        self.sent.append((content, kwargs))
        self._done = True

    async def defer(self, **kwargs):
        self._done = True


class FakeUser(SimpleNamespace):
    def __str__(self) -> str:
        return self.name


def _make_interaction(
    name="ping",
    *,
    user_id=1,
    kind=discord.InteractionType.application_command,
    command_type=1,
    guild_name="Igloo",
):
    return SimpleNamespace(
        type=kind,
        data={"name": name, "type": command_type},
        user=FakeUser(id=user_id, name=f"user{user_id}"),
        guild=SimpleNamespace(name=guild_name) if guild_name else None,
        guild_id=77 if guild_name else None,
        response=FakeResponse(),
        followup=SimpleNamespace(send=AsyncMock()),
        extras={},
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_interaction():
    return _make_interaction

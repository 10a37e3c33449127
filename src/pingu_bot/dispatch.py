"""
Interaction dispatch.

Every inbound interaction walks the same path::

    received -> discarded                      (not a slash command)
             -> unknown                        (name not registered)
             -> denied                         (cooldown still running)
             -> invoked -> completed | failed

Handler failures stop here: they are logged with their traceback and the
user gets a generic notice, never the exception text.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any

import discord

from .commands import CHAT_INPUT, CommandDescriptor
from .constants import COOLDOWN_MESSAGE, FAILURE_MESSAGE
from .cooldowns import CooldownTracker
from .registry import HandlerRegistry

REGISTRY_EXTRA = "registry"


class DispatchOutcome(enum.Enum):
    DISCARDED = "discarded"
    UNKNOWN = "unknown"
    DENIED = "denied"
    COMPLETED = "completed"
    FAILED = "failed"


def _is_chat_input(interaction: Any) -> bool:
    if getattr(interaction, "type", None) is not discord.InteractionType.application_command:
        return False
    data = getattr(interaction, "data", None) or {}
    return data.get("type", CHAT_INPUT) == CHAT_INPUT


def _command_name(interaction: Any) -> str | None:
    data = getattr(interaction, "data", None) or {}
    return data.get("name")


def _origin(interaction: Any) -> str:
    guild = getattr(interaction, "guild", None)
    return getattr(guild, "name", None) or "DM"


class Dispatcher:
    """Route slash command interactions to their registered handlers."""

    def __init__(
        self,
        registry: HandlerRegistry,
        cooldowns: CooldownTracker,
        *,
        handler_timeout: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._cooldowns = cooldowns
        self._timeout = handler_timeout
        self._log = logger or logging.getLogger(__name__)

    async def dispatch(self, interaction: discord.Interaction) -> DispatchOutcome:
        """Run the handler for ``interaction`` and report how far it got."""

        if not _is_chat_input(interaction):
            return DispatchOutcome.DISCARDED

        name = _command_name(interaction)
        command = self._registry.get(name) if name else None
        if command is None:
            self._log.error("No command matching %s was found.", name)
            return DispatchOutcome.UNKNOWN

        if command.cooldown:
            remaining = self._cooldowns.check(command.name, interaction.user.id, command.cooldown)
            if remaining is not None:
                await self._notify_cooldown(command, interaction, remaining)
                return DispatchOutcome.DENIED
            # Recorded before the handler runs so a slow handler cannot be re-entered.
            self._cooldowns.record(command.name, interaction.user.id, command.cooldown)

        try:
            await self._invoke(command, interaction)
        except Exception:
            self._log.exception("Error executing command %s", command.name)
            await self._notify_failure(command, interaction)
            return DispatchOutcome.FAILED

        self._log.info(
            "✓ %s used /%s in %s",
            interaction.user,
            command.name,
            _origin(interaction),
            extra={
                "data": {
                    "user_id": interaction.user.id,
                    "command": command.name,
                    "guild_id": getattr(interaction, "guild_id", None),
                }
            },
        )
        return DispatchOutcome.COMPLETED

    async def _invoke(self, command: CommandDescriptor, interaction: discord.Interaction) -> None:
        extras = getattr(interaction, "extras", None)
        if isinstance(extras, dict):
            extras[REGISTRY_EXTRA] = self._registry

        if self._timeout is None:
            await command.callback(interaction)
        else:
            await asyncio.wait_for(command.callback(interaction), timeout=self._timeout)

    async def _notify_cooldown(
        self, command: CommandDescriptor, interaction: discord.Interaction, remaining: float
    ) -> None:
        try:
            await interaction.response.send_message(
                COOLDOWN_MESSAGE.format(remaining=remaining, name=command.name),
                ephemeral=True,
            )
        except discord.HTTPException:
            self._log.exception("Could not send cooldown notice for %s", command.name)

    async def _notify_failure(
        self, command: CommandDescriptor, interaction: discord.Interaction
    ) -> None:
        # Discord allows exactly one initial response per interaction.
        try:
            if interaction.response.is_done():
                await interaction.followup.send(FAILURE_MESSAGE, ephemeral=True)
            else:
                await interaction.response.send_message(FAILURE_MESSAGE, ephemeral=True)
        except discord.HTTPException:
            self._log.exception("Could not report failure of %s to the user", command.name)


__all__ = ["DispatchOutcome", "Dispatcher", "REGISTRY_EXTRA"]

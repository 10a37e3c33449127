"""
Slash command descriptors and the command manifest.

Every module listed in :data:`COMMAND_MANIFEST` exposes a module-level
``command`` attribute::

    from pingu_bot.commands import CommandCategory, CommandDescriptor

    async def run(interaction: discord.Interaction) -> None: ...

    command = CommandDescriptor(
        name="ping",
        description="Check the bot latency",
        category=CommandCategory.UTILITY,
        callback=run,
        cooldown=3,
    )

The :class:`~pingu_bot.registry.HandlerRegistry` imports the listed modules at
startup and indexes the descriptors by name. Categories missing from the
manifest simply contribute no commands.

Adding a command:

1. Create the module under the category package and define ``command``.
2. Append its dotted path to the category entry below.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Sequence, Tuple

import discord

__all__ = [
    "COMMAND_MANIFEST",
    "CommandCallback",
    "CommandCategory",
    "CommandDescriptor",
    "CommandOption",
]

CommandCallback = Callable[[discord.Interaction], Awaitable[None]]

CHAT_INPUT = 1


class CommandCategory(enum.Enum):
    GAMES = "games"
    ECONOMY = "economy"
    LEVELING = "leveling"
    FUN = "fun"
    UTILITY = "utility"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True, slots=True)
class CommandOption:
    """One typed argument of a slash command."""

    name: str
    description: str
    type: discord.AppCommandOptionType = discord.AppCommandOptionType.string
    required: bool = False
    choices: Tuple[Tuple[str, Any], ...] = ()

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "required": self.required,
        }
        if self.choices:
            payload["choices"] = [{"name": name, "value": value} for name, value in self.choices]
        return payload


@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    """Static description of a slash command plus the coroutine that runs it."""

    name: str
    description: str
    category: CommandCategory
    callback: CommandCallback
    cooldown: float | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)
    options: Tuple[CommandOption, ...] = ()

    @property
    def default_member_permissions(self) -> str | None:
        """Permission bitfield as Discord expects it, or ``None`` when unrestricted."""

        if not self.permissions:
            return None
        return str(discord.Permissions(**{flag: True for flag in self.permissions}).value)

    def to_payload(self) -> Dict[str, Any]:
        """Return the application command JSON for this descriptor."""

        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": CHAT_INPUT,
            "options": [option.to_payload() for option in self.options],
        }
        permissions = self.default_member_permissions
        if permissions is not None:
            payload["default_member_permissions"] = permissions
        return payload


# Category -> dotted module paths (or already imported units). Order matters:
# a later unit that reuses a name replaces the earlier one.
COMMAND_MANIFEST: Mapping[CommandCategory, Sequence[Any]] = {
    CommandCategory.UTILITY: (
        "pingu_bot.commands.utility.ping",
        "pingu_bot.commands.utility.help",
    ),
}

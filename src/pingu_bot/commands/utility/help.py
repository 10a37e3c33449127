from __future__ import annotations

import discord

from .. import CommandCategory, CommandDescriptor
from ...constants import CATEGORY_EMOJI, COLORS, DEFAULT_CATEGORY_EMOJI
from ...dispatch import REGISTRY_EXTRA


def build_help_embed(grouped, requested_by) -> discord.Embed:
    """
    Render one embed field per category that has commands.

    ``grouped`` maps :class:`CommandCategory` to descriptors, as returned by
    :meth:`HandlerRegistry.by_category`.
    """

    embed = discord.Embed(
        title="🐧 Pingu Bot - Help",
        description="Here are all available commands:",
        colour=COLORS["INFO"],
        timestamp=discord.utils.utcnow(),
    )

    for category, commands in grouped.items():
        if not commands:
            continue
        emoji = CATEGORY_EMOJI.get(category.value, DEFAULT_CATEGORY_EMOJI)
        listing = "\n".join(f"`/{cmd.name}` - {cmd.description}" for cmd in commands)
        embed.add_field(name=f"{emoji} {category.label}", value=listing or "No commands", inline=False)

    avatar = getattr(requested_by, "display_avatar", None)
    embed.set_footer(
        text=f"Requested by {requested_by}",
        icon_url=getattr(avatar, "url", None),
    )
    return embed


async def run(interaction: discord.Interaction) -> None:
    """Send the command listing grouped by category."""

    registry = interaction.extras.get(REGISTRY_EXTRA)
    grouped = registry.by_category() if registry is not None else {}
    await interaction.response.send_message(embed=build_help_embed(grouped, interaction.user))


command = CommandDescriptor(
    name="help",
    description="Display all available commands and their descriptions",
    category=CommandCategory.UTILITY,
    callback=run,
)

from __future__ import annotations

import discord

from . import EventDescriptor


async def handle(bot, interaction: discord.Interaction) -> None:
    """Hand every interaction to the bot's dispatcher."""

    await bot.dispatcher.dispatch(interaction)


event = EventDescriptor(name="interaction", callback=handle)

from __future__ import annotations

import logging

import discord

from . import EventDescriptor
from ..constants import PRESENCE_TEXT

logger = logging.getLogger(__name__)


async def handle(bot) -> None:
    """Log the session summary and set the bot's presence."""

    transport = bot.transport
    user = transport.user
    if user is None:
        return

    logger.info("Logged in as %s (ID: %s)", user, user.id)
    logger.info("Serving %d guilds", len(transport.guilds))
    logger.info("Total users: %d", len(transport.users))

    await transport.change_presence(activity=discord.Game(name=PRESENCE_TEXT))
    logger.info("Pingu Bot is ready!")


event = EventDescriptor(name="ready", callback=handle, once=True)

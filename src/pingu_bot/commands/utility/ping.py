from __future__ import annotations

import math

import discord

from .. import CommandCategory, CommandDescriptor


def _ms(seconds: float) -> str:
    if math.isnan(seconds) or math.isinf(seconds):
        return "n/a"
    return f"{round(seconds * 1000)}ms"


async def run(interaction: discord.Interaction) -> None:
    """Reply, then edit the reply with round-trip and gateway latency."""

    await interaction.response.send_message("🏓 Pinging...", ephemeral=True)
    sent = await interaction.original_response()

    roundtrip = (sent.created_at - interaction.created_at).total_seconds()
    websocket = interaction.client.latency

    await interaction.edit_original_response(
        content="\n".join(
            [
                "🏓 **Pong!**",
                f"📡 Roundtrip Latency: `{_ms(roundtrip)}`",
                f"⚡ WebSocket Latency: `{_ms(websocket)}`",
            ]
        )
    )


command = CommandDescriptor(
    name="ping",
    description="Check the bot latency and API response time",
    category=CommandCategory.UTILITY,
    callback=run,
    cooldown=3,
)

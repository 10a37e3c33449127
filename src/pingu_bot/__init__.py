"""Pingu Bot: slash command plugin host for Discord."""

__version__ = "1.0.0"

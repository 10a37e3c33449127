"""Root logging setup shared by the CLI entry point and the config package."""

from __future__ import annotations

import json
import logging

import discord

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


class PayloadFormatter(logging.Formatter):
    """
    Wrap another formatter and append the record's ``data`` as indented JSON.

    Callers attach the payload with ``logger.info(msg, extra={"data": {...}})``.
    """

    def __init__(self, inner: logging.Formatter | None = None) -> None:
        super().__init__()
        self._inner = inner or logging.Formatter()

    def format(self, record: logging.LogRecord) -> str:
        text = self._inner.format(record)
        data = getattr(record, "data", None)
        if data is None:
            return text
        rendered = json.dumps(data, indent=2, default=str, ensure_ascii=False)
        return f"{text}\n{rendered}"


def resolve_level(name: str | int) -> int:
    if isinstance(name, int):
        return name
    try:
        return LEVELS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown log level {name!r}") from exc


def configure_logging(level: str | int = "info") -> logging.Handler:
    """
    Install the root handler.

    ``discord.utils.setup_logging`` colours the level name when the stream is a
    terminal and falls back to plain ``[time] [LEVEL] name: message`` lines
    otherwise; the chosen formatter is then wrapped to render payloads.
    """

    handler = logging.StreamHandler()
    discord.utils.setup_logging(handler=handler, level=resolve_level(level), root=True)
    handler.setFormatter(PayloadFormatter(handler.formatter))
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    return handler


__all__ = ["LEVELS", "PayloadFormatter", "configure_logging", "resolve_level"]

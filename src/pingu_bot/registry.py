"""
Handler registry: turns the command and event manifests into live handlers.

Commands are indexed by name for the dispatcher. Events are installed
directly on the gateway transport, wrapped so the callback receives the bot
controller before the event arguments.
"""

from __future__ import annotations

import logging
from importlib import import_module
from typing import Any, Dict, Iterator, List, Mapping, Sequence

from .commands import COMMAND_MANIFEST, CommandCategory, CommandDescriptor
from .events import EVENT_MANIFEST, EventDescriptor

INDEX_UNIT = "__init__"


def _unit_label(unit: Any) -> str:
    if isinstance(unit, str):
        return unit
    return getattr(unit, "__name__", None) or repr(unit)


def _resolve_unit(unit: Any) -> Any:
    """Import dotted module paths; pass anything else through untouched."""

    if isinstance(unit, str):
        return import_module(unit)
    return unit


class HandlerRegistry:
    """Owns every loaded command and event descriptor for the process lifetime."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._commands: Dict[str, CommandDescriptor] = {}
        self._events: List[EventDescriptor] = []

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #
    def load_commands(
        self, manifest: Mapping[CommandCategory, Sequence[Any]] | None = None
    ) -> int:
        """
        Register the commands of every category in ``manifest``.

        Categories without an entry are skipped. Malformed units are logged
        and skipped; import failures propagate.
        """

        manifest = COMMAND_MANIFEST if manifest is None else manifest

        for category in CommandCategory:
            units = manifest.get(category)
            if units is None:
                continue

            for unit in units:
                label = _unit_label(unit)
                descriptor = getattr(_resolve_unit(unit), "command", None)
                if not self._is_valid_command(descriptor):
                    self._log.warning(
                        'Command unit %s is missing a valid "command" descriptor '
                        "(name and callback are required); skipping",
                        label,
                    )
                    continue

                if descriptor.name in self._commands:
                    self._log.info(
                        "Command %s from %s replaces an earlier definition",
                        descriptor.name,
                        label,
                    )
                self._commands[descriptor.name] = descriptor
                self._log.info("Loaded command: %s (%s)", descriptor.name, category.value)

        self._log.info("Loaded %d commands", len(self._commands))
        return len(self._commands)

    def load_events(self, transport, context: Any, manifest: Sequence[Any] | None = None) -> int:
        """
        Subscribe every event in ``manifest`` on ``transport``.

        Returns the number of subscriptions installed by this call. Calling it
        twice installs every subscription twice.
        """

        manifest = EVENT_MANIFEST if manifest is None else manifest
        if not manifest:
            self._log.warning("No event handlers declared, skipping event loading")
            return 0

        installed = 0
        for unit in manifest:
            label = _unit_label(unit)
            if label.rsplit(".", 1)[-1] == INDEX_UNIT:
                continue

            descriptor = getattr(_resolve_unit(unit), "event", None)
            if not self._is_valid_event(descriptor):
                self._log.warning(
                    'Event unit %s is missing a valid "event" descriptor; skipping', label
                )
                continue

            handler = self._bind(descriptor, context)
            if descriptor.once:
                transport.once(descriptor.name, handler)
            else:
                transport.on(descriptor.name, handler)

            self._events.append(descriptor)
            installed += 1
            self._log.info("Loaded event: %s", descriptor.name)

        self._log.info("Loaded %d events", installed)
        return installed

    @staticmethod
    def _bind(descriptor: EventDescriptor, context: Any):
        async def _handler(*args: Any, **kwargs: Any) -> None:
            await descriptor.callback(context, *args, **kwargs)

        _handler.__name__ = f"on_{descriptor.name}"
        return _handler

    @staticmethod
    def _is_valid_command(descriptor: Any) -> bool:
        return (
            isinstance(descriptor, CommandDescriptor)
            and bool(descriptor.name)
            and callable(descriptor.callback)
        )

    @staticmethod
    def _is_valid_event(descriptor: Any) -> bool:
        return (
            isinstance(descriptor, EventDescriptor)
            and bool(descriptor.name)
            and callable(descriptor.callback)
        )

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #
    def get(self, name: str) -> CommandDescriptor | None:
        return self._commands.get(name)

    def names(self) -> List[str]:
        return list(self._commands)

    def by_category(self) -> Dict[CommandCategory, List[CommandDescriptor]]:
        """Group commands by category, in category order, omitting empty ones."""

        grouped: Dict[CommandCategory, List[CommandDescriptor]] = {}
        for category in CommandCategory:
            members = [cmd for cmd in self._commands.values() if cmd.category is category]
            if members:
                grouped[category] = members
        return grouped

    @property
    def events(self) -> List[EventDescriptor]:
        return list(self._events)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(list(self._commands.values()))


__all__ = ["HandlerRegistry"]

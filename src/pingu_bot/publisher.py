"""Push the registered command set to Discord's application command catalog."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List

import aiohttp

from .commands import CommandDescriptor
from .errors import PublishError

DEFAULT_API_BASE = "https://discord.com/api/v10"


class CommandPublisher:
    """
    Replace the bot's global slash commands with the local set.

    Discord treats ``PUT /applications/{id}/commands`` as an overwrite, so
    publishing the same set twice leaves the remote catalog unchanged.
    """

    def __init__(
        self,
        token: str,
        application_id: str | int,
        *,
        api_base: str = DEFAULT_API_BASE,
        session: aiohttp.ClientSession | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._token = token
        self._application_id = str(application_id)
        self._api_base = api_base.rstrip("/")
        self._session = session
        self._log = logger or logging.getLogger(__name__)

    @property
    def endpoint(self) -> str:
        return f"{self._api_base}/applications/{self._application_id}/commands"

    @staticmethod
    def build_payload(commands: Iterable[CommandDescriptor]) -> List[Dict[str, Any]]:
        return [command.to_payload() for command in commands]

    async def publish(self, commands: Iterable[CommandDescriptor]) -> List[Dict[str, Any]]:
        """
        Submit ``commands`` as the complete catalog and return the payload sent.

        :raises PublishError: when the request fails or Discord rejects it.
        """

        payload = self.build_payload(commands)
        self._log.info("Started refreshing %d application (/) commands.", len(payload))

        try:
            if self._session is not None:
                await self._put(self._session, payload)
            else:
                async with aiohttp.ClientSession() as session:
                    await self._put(session, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            self._log.exception("Error registering slash commands")
            raise PublishError(f"Failed to publish {len(payload)} command(s): {exc}") from exc

        self._log.info("Successfully reloaded %d application (/) commands.", len(payload))
        return payload

    async def _put(self, session: aiohttp.ClientSession, payload: List[Dict[str, Any]]) -> None:
        headers = {"Authorization": f"Bot {self._token}"}
        async with session.put(self.endpoint, json=payload, headers=headers) as resp:
            resp.raise_for_status()


__all__ = ["CommandPublisher", "DEFAULT_API_BASE"]

"""Forward HOS commands to the local HTTP service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Tuple

import aiohttp

from ..core.config import PairingContext
from ..core.exceptions import LocalRequestError
from ..core.protocol import (
    REQUEST,
    ClientEnvelope,
    ServerEnvelope,
    response_envelope,
)

logger = logging.getLogger(__name__)


class LocalDispatcher:
    """Executes forwarded requests against the local service.

    TLS verification is off for the local leg only: the local service is
    trusted by network locality and often runs with a self-signed cert.
    """

    def __init__(
        self,
        context: PairingContext,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.context = context
        self._session = session

    async def __aenter__(self) -> LocalDispatcher:
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(
        self, exc_type: Any, exc_val: Any, exc_tb: Any
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if not self._session:
            timeout = aiohttp.ClientTimeout(total=self.context.local_timeout)
            connector = aiohttp.TCPConnector(ssl=False)
            self._session = aiohttp.ClientSession(
                timeout=timeout, connector=connector
            )
        return self._session

    async def fetch(self, path: str) -> Tuple[int, bytes]:
        """GET a path on the local service, returning status and body."""
        session = await self._get_session()
        url = self.context.local_url(path)

        try:
            async with session.get(url) as resp:
                return resp.status, await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LocalRequestError(str(e) or type(e).__name__, url) from e

    async def dispatch(
        self, request: ServerEnvelope
    ) -> Optional[ClientEnvelope]:
        """Handle one command; return the reply to send, if any."""
        if request.kind != REQUEST:
            logger.debug(f"Ignoring message of type {request.kind!r}")
            return None

        if request.method != "GET":
            logger.debug(f"Ignoring unsupported method {request.method!r}")
            return None

        try:
            status, body = await self.fetch(request.url)
        except LocalRequestError as e:
            # No reply: HOS gets nothing back for this id
            logger.error(f"Error in HTTP response from local server: {e}")
            return None

        return response_envelope(
            id=request.id,
            code=self.context.pairing_code,
            status=status,
            body=body,
        )

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

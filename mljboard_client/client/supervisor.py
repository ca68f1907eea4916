"""Reconnect loop that keeps one tunnel session alive."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

from ..core.config import PairingContext
from ..core.connection import RelayConnection
from ..core.exceptions import ConnectionError
from .dispatcher import LocalDispatcher
from .session import TunnelSession

logger = logging.getLogger(__name__)


class SupervisorState(str, Enum):
    """Connection lifecycle states"""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"
    STOPPED = "stopped"


class ConnectionSupervisor:
    """
    Connects to HOS and runs a session; reconnects forever.

    A session that ends is followed by an immediate reconnect. A failed
    connect waits ``context.retry_delay`` seconds first. There is no
    retry limit and no backoff growth.
    """

    def __init__(
        self,
        context: PairingContext,
        connection_factory: Optional[Callable[[str], Any]] = None,
        dispatcher: Optional[LocalDispatcher] = None,
    ) -> None:
        self.context = context
        self.connection_factory = connection_factory or RelayConnection
        self.dispatcher = dispatcher or LocalDispatcher(context)
        self.state = SupervisorState.DISCONNECTED
        self.connect_attempts = 0
        self.sessions = 0
        self._running = False

    def _set_state(self, state: SupervisorState) -> None:
        logger.debug(f"Supervisor {self.state.value} -> {state.value}")
        self.state = state

    async def run(self) -> None:
        """Run the reconnect loop until stop() is called."""
        self._running = True
        try:
            while self._running:
                self._set_state(SupervisorState.CONNECTING)
                connection = await self._connect()

                if connection is None:
                    self._set_state(SupervisorState.FAILED)
                    await asyncio.sleep(self.context.retry_delay)
                    continue

                self._set_state(SupervisorState.CONNECTED)
                await self._run_session(connection)
                self._set_state(SupervisorState.DISCONNECTED)
        finally:
            self._running = False
            self._set_state(SupervisorState.STOPPED)
            await self.dispatcher.close()

    async def _connect(self) -> Optional[Any]:
        """One connect attempt; None on failure."""
        self.connect_attempts += 1
        connection = self.connection_factory(self.context.hos_addr)
        try:
            await connection.connect()
        except ConnectionError as e:
            logger.warning(
                "Failed to connect to HOS server. "
                f"Retrying in {self.context.retry_delay:g}s."
            )
            logger.debug(f"Connect error: {e}")
            return None

        logger.info("Connected to HOS server")
        return connection

    async def _run_session(self, connection: Any) -> None:
        """Run one session to completion, whatever ends it."""
        self.sessions += 1
        session = TunnelSession(connection, self.dispatcher, self.context)
        try:
            await session.run()
        except ConnectionError as e:
            logger.debug(f"Session error: {e}")
        finally:
            await connection.close()

        logger.warning("Disconnected from HOS server. Retrying.")

    def stop(self) -> None:
        """Stop after the current step."""
        self._running = False

"""WebSocket connection management for the HOS relay."""

from __future__ import annotations

from typing import Any, AsyncIterator, Optional, Union

import websockets

from .exceptions import ConnectionError

Frame = Union[str, bytes]


class RelayConnection:
    """WebSocket connection to the HOS relay carrying JSON text frames."""

    def __init__(
        self,
        url: str,
        ping_interval: Optional[float] = 30,
        ping_timeout: Optional[float] = 10,
    ):
        self.url = url
        self.ping_interval = ping_interval
        self.ping_timeout = ping_timeout
        self._ws: Optional[Any] = None  # websockets ClientConnection

    async def connect(self) -> None:
        """Establish WebSocket connection."""
        try:
            self._ws = await websockets.connect(
                self.url,
                ping_interval=self.ping_interval,
                ping_timeout=self.ping_timeout,
            )
        except Exception as e:
            raise ConnectionError(f"Failed to connect: {str(e)}") from e

    async def frames(self) -> AsyncIterator[Frame]:
        """Yield inbound frames until the relay closes the stream.

        A clean close ends iteration; an abnormal close raises
        ConnectionError.
        """
        if not self._ws:
            raise ConnectionError("Not connected")

        try:
            async for message in self._ws:
                yield message
        except websockets.ConnectionClosedError as e:
            raise ConnectionError(f"Connection lost: {str(e)}") from e

    def __aiter__(self) -> AsyncIterator[Frame]:
        return self.frames()

    async def send(self, data: str) -> None:
        """Send a text frame."""
        if not self._ws:
            raise ConnectionError("Not connected")

        try:
            await self._ws.send(data)
        except websockets.ConnectionClosed as e:
            raise ConnectionError(f"Send failed: {str(e)}") from e

    async def close(self) -> None:
        """Close the connection."""
        if self._ws:
            await self._ws.close()
            self._ws = None

    @property
    def is_connected(self) -> bool:
        """Check if connection is active."""
        return self._ws is not None

    async def __aenter__(self) -> RelayConnection:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(
        self, exc_type: Any, exc_val: Any, exc_tb: Any
    ) -> None:
        """Async context manager exit."""
        await self.close()

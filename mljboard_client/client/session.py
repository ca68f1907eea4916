"""One live tunnel session over a relay connection."""

from __future__ import annotations

import logging
from typing import Any

from ..core.config import PairingContext
from ..core.exceptions import DecodeError
from ..core.protocol import decode_message, encode_message, pairing_envelope
from .dispatcher import LocalDispatcher

logger = logging.getLogger(__name__)


class TunnelSession:
    """Pairs with HOS, then serves its commands one at a time.

    Commands are handled strictly in order: a slow local call holds back
    every later command on this connection.
    """

    def __init__(
        self,
        connection: Any,  # RelayConnection or compatible
        dispatcher: LocalDispatcher,
        context: PairingContext,
    ) -> None:
        self.connection = connection
        self.dispatcher = dispatcher
        self.context = context
        self.handled = 0

    async def pair(self) -> None:
        """Send the pairing message before reading anything."""
        msg = encode_message(pairing_envelope(self.context.pairing_code))
        # HOS reads the first frame line by line
        await self.connection.send(msg + "\n")

    async def run(self) -> None:
        """Run until the relay stream ends.

        Returns when the stream ends cleanly; transport errors propagate
        as ConnectionError.
        """
        await self.pair()

        async for frame in self.connection:
            await self.handle_frame(frame)

    async def handle_frame(self, frame: Any) -> None:
        """Decode one inbound frame, dispatch it and write any reply."""
        try:
            request = decode_message(frame)
        except DecodeError as e:
            logger.warning(f"Bad server request. {e}")
            return

        logger.debug(f"Server request: {request!r}")
        reply = await self.dispatcher.dispatch(request)
        if reply is None:
            return

        await self.connection.send(encode_message(reply))
        self.handled += 1

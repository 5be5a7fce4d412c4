from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from apdukit.core.smartcard import TransportError

if TYPE_CHECKING:
    from apdukit.core.smartcard.card import Card

lg = logging.getLogger(__name__)


class Agent:
    """PC/SC transport: finds a card, then ships raw APDU bytes to it.

    The blocking pyscard call runs in a worker thread. Concurrent callers
    are not serialized here.
    """

    def __init__(self, card: Card, reader: str | None = None) -> None:
        self._card = card
        self._reader = reader

    def connect(self) -> None:
        """Connect to the named reader, or the first reader holding a card."""
        available = self._card.list_readers()
        if self._reader is not None:
            available = [r for r in available if self._reader in str(r)]
        if not available:
            raise TransportError("no readers found")
        for reader in available:
            try:
                self._card.connect(reader)
                lg.info("connected to '%s'", reader)
                return
            except Exception:
                lg.debug("no card on %s", reader)
        raise TransportError("no card found on any reader")

    def connect_to(self, reader) -> None:
        """Connect to a specific pyscard reader or card object."""
        self._card.connect(reader)
        lg.info("connected to '%s'", getattr(reader, "reader", reader))

    def disconnect(self) -> None:
        self._card.disconnect()

    def get_atr(self) -> bytes:
        return self._card.get_atr()

    async def transmit(self, command: bytes) -> bytes:
        return await asyncio.to_thread(self._card.transmit, command)

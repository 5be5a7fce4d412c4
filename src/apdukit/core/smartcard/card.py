from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartcard.CardConnection import CardConnection
from smartcard.Exceptions import CardConnectionException
from smartcard.System import readers

from apdukit.core.smartcard.errors import TransportError
from apdukit.core.smartcard.observer import LoggingCardObserver

if TYPE_CHECKING:
    from smartcard.reader.Reader import Reader

lg = logging.getLogger(__name__)


class Card:
    """Blocking wrapper around a pyscard connection.

    Works on raw bytes: the caller encodes commands and parses responses.
    """

    def __init__(self) -> None:
        self._connection: CardConnection | None = None
        self._observer = LoggingCardObserver()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @staticmethod
    def list_readers() -> list[Reader]:
        return readers()

    def connect(self, reader: Reader) -> None:
        connection = reader.createConnection()
        connection.addObserver(self._observer)
        try:
            connection.connect()
        except Exception:
            connection.deleteObserver(self._observer)
            raise
        self._connection = connection

    def disconnect(self) -> None:
        if self._connection is not None:
            self._connection.disconnect()
            self._connection.deleteObserver(self._observer)
            self._connection = None

    def get_atr(self) -> bytes:
        if self._connection is None:
            raise TransportError("not connected to a card")
        return bytes(self._connection.getATR())

    def transmit(self, command: bytes) -> bytes:
        """Send one command and return data followed by SW1 SW2."""
        if self._connection is None:
            raise TransportError("not connected to a card")
        try:
            data, sw1, sw2 = self._connection.transmit(list(command))
        except CardConnectionException as exc:
            raise TransportError(f"transmit failed: {exc}") from exc
        return bytes(data) + bytes([sw1, sw2])

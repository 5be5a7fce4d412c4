from __future__ import annotations

import logging
from collections.abc import Callable

from smartcard.CardConnectionObserver import CardConnectionObserver
from smartcard.CardMonitoring import CardObserver

from apdukit.core.smartcard.logging import PROTOCOL, RESET, TRACE, sw_color
from apdukit.core.smartcard.types import ResponseApdu

lg = logging.getLogger(__name__)


LINE_BYTES = 16


class LoggingCardObserver(CardConnectionObserver):
    """CardConnectionObserver that logs APDU traffic via Python logging."""

    def _log_hex(self, prefix: str, data: bytes) -> None:
        """Log hex data, wrapping at LINE_BYTES bytes per line."""
        pad = " " * len(prefix)
        for i in range(0, len(data), LINE_BYTES):
            chunk = data[i : i + LINE_BYTES].hex(" ").upper()
            lg.log(TRACE, "%s%s", prefix if i == 0 else pad, chunk)

    def update(self, observable, event):
        if event.type in ("connect", "reconnect", "disconnect"):
            lg.log(PROTOCOL, "%s", event.type)

        elif event.type == "command":
            self._log_hex(">> ", bytes(event.args[0]))

        elif event.type == "response":
            data, sw1, sw2 = event.args[0], event.args[1], event.args[2]
            resp = ResponseApdu.parse([*data, sw1, sw2])
            if resp.data:
                self._log_hex("<< ", resp.data)
            status = resp.classify()
            lg.log(TRACE, "<< %s%s%s %s", sw_color(resp.sw1), status.code.upper(), RESET, status.meaning)


class InsertionObserver(CardObserver):
    """CardObserver that hands every newly inserted card to a callback.

    pyscard calls ``update`` from its monitoring thread; the callback runs
    there too.
    """

    def __init__(self, on_insert: Callable[[object], None]) -> None:
        self._on_insert = on_insert

    def update(self, observable, handlers):
        added, removed = handlers
        for card in removed:
            lg.info("card removed from '%s'", card.reader)
        for card in added:
            lg.info("card inserted into '%s', ATR: %s", card.reader, bytes(card.atr).hex())
            try:
                self._on_insert(card)
            except Exception as exc:
                lg.error("error handling card in '%s': %s", card.reader, exc)

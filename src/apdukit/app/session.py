"""Card sessions driven from the command line."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from smartcard.CardMonitoring import CardMonitor

from apdukit.core.base import DEFAULT_MAX_RETRIES, ISO7816, Agent
from apdukit.core.smartcard import ApduError, ResponseApdu
from apdukit.core.smartcard.card import Card
from apdukit.core.smartcard.observer import InsertionObserver

lg = logging.getLogger(__name__)

PSE = b"1PAY.SYS.DDF01"  # EMV payment system environment

Operation = Callable[[ISO7816], Awaitable[ResponseApdu]]


def report(resp: ResponseApdu) -> None:
    status = resp.classify()
    if resp.data:
        lg.info("<< %s", resp.data.hex(" ").upper())
    lg.info("SW=%s %s", status.code.upper(), status.meaning)


def session(
    operation: Operation,
    *,
    reader: str | None = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> ResponseApdu | None:
    """Connect, run one card operation, report it, disconnect.

    Returns the final response, or None if the exchange failed.
    """
    agent = Agent(Card(), reader)
    try:
        agent.connect()
        lg.info("ATR: %s", agent.get_atr().hex(" ").upper())
        iso = ISO7816(agent.transmit, max_retries=max_retries)
        resp = asyncio.run(operation(iso))
    except ApduError as exc:
        lg.error("%s: %s", type(exc).__name__, exc)
        return None
    finally:
        agent.disconnect()
    report(resp)
    return resp


def watch(
    aid: bytes = PSE,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    poll: float = 1.0,
) -> None:
    """Select ``aid`` on every card inserted until interrupted."""

    def on_insert(card) -> None:
        agent = Agent(Card())
        agent.connect_to(card)
        try:
            iso = ISO7816(agent.transmit, max_retries=max_retries)
            resp = asyncio.run(iso.select_file(aid))
            lg.info("select %s: %s (%s)", aid.hex().upper(), resp.to_hex(), resp.classify().meaning)
        finally:
            agent.disconnect()

    monitor = CardMonitor()
    observer = InsertionObserver(on_insert)
    monitor.addObserver(observer)
    lg.info("waiting for cards, Ctrl-C to stop")
    try:
        while True:
            time.sleep(poll)
    except KeyboardInterrupt:
        pass
    finally:
        monitor.deleteObserver(observer)

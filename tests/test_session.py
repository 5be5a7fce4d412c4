import logging
from types import SimpleNamespace

import pytest

from apdukit.app import session
from apdukit.core.smartcard import TransportError
from apdukit.core.smartcard.logging import TRACE
from apdukit.core.smartcard.observer import InsertionObserver, LoggingCardObserver


class FakeAgent:
    instances = []

    def __init__(self, card, reader=None, responses=(b"\x90\x00",), fail=None):
        self.reader = reader
        self.responses = list(responses)
        self.fail = fail
        self.connected = False
        FakeAgent.instances.append(self)

    def connect(self):
        if self.fail:
            raise self.fail
        self.connected = True

    def connect_to(self, reader):
        self.connected = True

    def disconnect(self):
        self.connected = False

    def get_atr(self):
        return b"\x3b\x00"

    async def transmit(self, command):
        return self.responses.pop(0)


@pytest.fixture
def agent(monkeypatch):
    FakeAgent.instances = []

    def install(**kwargs):
        monkeypatch.setattr(session, "Agent", lambda card, reader=None: FakeAgent(card, reader, **kwargs))

    return install


def test_session_reports_response(agent, caplog):
    agent(responses=[b"\x6f\x00\x90\x00"])
    with caplog.at_level(logging.INFO):
        resp = session.session(lambda iso: iso.select_file(session.PSE), reader="ACS")
    assert resp.success
    assert FakeAgent.instances[0].reader == "ACS"
    assert not FakeAgent.instances[0].connected
    assert "SW=9000 Normal processing" in caplog.text


def test_session_error_returns_none(agent, caplog):
    agent(fail=TransportError("no readers found"))
    assert session.session(lambda iso: iso.get_data(0, 0x66)) is None
    assert "TransportError: no readers found" in caplog.text


def test_insertion_observer_calls_back_per_card():
    seen = []
    observer = InsertionObserver(seen.append)
    cards = [SimpleNamespace(reader="ACS 00", atr=[0x3B, 0x00])]
    observer.update(None, (cards, []))
    assert seen == cards


def test_insertion_observer_logs_callback_errors(caplog):
    def boom(card):
        raise TransportError("card removed mid-exchange")

    observer = InsertionObserver(boom)
    observer.update(None, ([SimpleNamespace(reader="ACS 00", atr=[0x3B])], []))
    assert "card removed mid-exchange" in caplog.text


class FakeMonitor:
    """Stands in for pyscard's CardMonitor; records its observers."""

    instances = []

    def __init__(self):
        self.observers = []
        FakeMonitor.instances.append(self)

    def addObserver(self, observer):
        self.observers.append(observer)

    def deleteObserver(self, observer):
        self.observers.remove(observer)


def test_watch_selects_aid_on_insert(agent, monkeypatch, caplog):
    agent(responses=[b"\x61\x02", b"\x6f\x00\x90\x00"])
    FakeMonitor.instances = []
    monkeypatch.setattr(session, "CardMonitor", FakeMonitor)
    inserted = SimpleNamespace(reader="ACS 00", atr=[0x3B, 0x00])

    def sleep(seconds):
        monitor = FakeMonitor.instances[0]
        monitor.observers[0].update(monitor, ([inserted], []))
        raise KeyboardInterrupt

    monkeypatch.setattr(session, "time", SimpleNamespace(sleep=sleep))
    with caplog.at_level(logging.INFO):
        session.watch()

    assert FakeMonitor.instances[0].observers == []
    assert len(FakeAgent.instances) == 1
    assert not FakeAgent.instances[0].connected
    assert "select 315041592E5359532E4444463031: 6f009000 (Normal processing)" in caplog.text


def test_logging_observer_explains_status(caplog):
    observer = LoggingCardObserver()
    with caplog.at_level(TRACE):
        observer.update(None, SimpleNamespace(type="command", args=[[0x00, 0xA4, 0x04, 0x00, 0x00]]))
        observer.update(None, SimpleNamespace(type="response", args=[[0xCA, 0xFE], 0x6A, 0x82]))
    assert ">> 00 A4 04 00 00" in caplog.text
    assert "<< CA FE" in caplog.text
    assert "6A82" in caplog.text
    assert "file or application not found" in caplog.text

"""Errors raised while building, exchanging, or parsing APDUs."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apdukit.core.smartcard.types import ResponseApdu


class ApduError(Exception):
    """Base class for all apdukit errors."""


class InvalidArgument(ApduError, ValueError):
    """A command APDU field is out of range or malformed."""


class MalformedResponse(ApduError):
    """A response is too short to carry SW1 SW2."""

    def __init__(self, raw: bytes) -> None:
        super().__init__(f"response needs at least 2 bytes, got {len(raw)}")
        self.raw = raw


class TransportError(ApduError):
    """The transport failed to deliver a command or its response."""


class MaxRetriesExceeded(ApduError):
    """The card kept answering 6Cxx after every Le correction."""

    def __init__(self, retries: int, response: ResponseApdu) -> None:
        super().__init__(
            f"maximum retries ({retries}) exceeded for wrong length "
            f"response {response.status_word}"
        )
        self.retries = retries
        self.response = response


class ExchangeLimitExceeded(ApduError):
    """One operation needed more transport calls than allowed."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"exchange limit ({limit}) reached before a final status")
        self.limit = limit


class Cancelled(ApduError, asyncio.CancelledError):
    """The transport call was cancelled mid-exchange."""

from apdukit.core.smartcard.errors import (
    ApduError,
    Cancelled,
    ExchangeLimitExceeded,
    InvalidArgument,
    MalformedResponse,
    MaxRetriesExceeded,
    TransportError,
)
from apdukit.core.smartcard.logging import PROTOCOL, TRACE
from apdukit.core.smartcard.status import Status, classify
from apdukit.core.smartcard.types import CommandApdu, ResponseApdu

__all__ = [
    "ApduError",
    "Cancelled",
    "CommandApdu",
    "ExchangeLimitExceeded",
    "InvalidArgument",
    "MalformedResponse",
    "MaxRetriesExceeded",
    "PROTOCOL",
    "ResponseApdu",
    "Status",
    "TRACE",
    "TransportError",
    "classify",
]

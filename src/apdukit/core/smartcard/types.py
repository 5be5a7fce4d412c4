from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from apdukit.core.smartcard.errors import InvalidArgument, MalformedResponse
from apdukit.core.smartcard.status import Status, classify


def _check_byte(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= 0xFF:
        raise InvalidArgument(f"{name} must be in 0..255, got {value}")
    return value


def _to_bytes(name: str, value: Iterable[int]) -> bytes:
    try:
        return bytes(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{name} must be a sequence of bytes: {exc}") from exc


@dataclass(frozen=True)
class CommandApdu:
    """ISO 7816 command APDU (short form only).

    ``data`` and ``le`` use ``None`` for "absent". The wire form always ends
    with one Le byte, written as 00 when no Le was given.
    """

    cla: int
    ins: int
    p1: int
    p2: int
    data: bytes | None = None
    le: int | None = None

    def __post_init__(self) -> None:
        for name in ("cla", "ins", "p1", "p2"):
            _check_byte(name, getattr(self, name))
        if self.le is not None:
            _check_byte("le", self.le)
        if self.data is not None:
            data = _to_bytes("data", self.data)
            if len(data) > 0xFF:
                raise InvalidArgument(f"data must be at most 255 bytes, got {len(data)}")
            object.__setattr__(self, "data", data)

    @classmethod
    def from_bytes(cls, raw: Iterable[int]) -> CommandApdu:
        """Split a raw short APDU into header, data and Le."""
        raw = _to_bytes("apdu", raw)
        if len(raw) < 4:
            raise InvalidArgument("APDU too short: need at least 4 bytes (CLA INS P1 P2)")
        cla, ins, p1, p2 = raw[:4]
        body = raw[4:]
        if not body:
            return cls(cla, ins, p1, p2)
        if len(body) == 1:
            return cls(cla, ins, p1, p2, le=body[0])
        lc = body[0]
        if len(body) == 1 + lc:
            return cls(cla, ins, p1, p2, data=body[1:])
        if len(body) == 2 + lc:
            return cls(cla, ins, p1, p2, data=body[1:-1], le=body[-1])
        raise InvalidArgument(f"Lc={lc:02X} does not match {len(body) - 1} remaining bytes")

    @property
    def case(self) -> int:
        """ISO 7816-3 case: 1 header only, 2 Le, 3 data, 4 data and Le."""
        if self.data is None:
            return 1 if self.le is None else 2
        return 3 if self.le is None else 4

    def set_le(self, le: int) -> None:
        """Replace the expected length. Only the trailing byte changes."""
        object.__setattr__(self, "le", _check_byte("le", le))

    def to_bytes(self) -> bytes:
        buf = bytearray([self.cla, self.ins, self.p1, self.p2])
        if self.data is not None:
            buf.append(len(self.data))
            buf.extend(self.data)
        buf.append(0x00 if self.le is None else self.le)
        return bytes(buf)

    def to_hex(self) -> str:
        return self.to_bytes().hex()

    def __repr__(self) -> str:
        return self.to_bytes().hex(" ").upper()


@dataclass(frozen=True)
class ResponseApdu:
    """ISO 7816 response APDU: optional data followed by SW1 SW2."""

    raw: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if len(raw) < 2:
            raise MalformedResponse(raw)
        object.__setattr__(self, "raw", raw)

    @classmethod
    def parse(cls, raw: Iterable[int]) -> ResponseApdu:
        return cls(bytes(raw))

    @property
    def data(self) -> bytes:
        return self.raw[:-2]

    payload = data

    @property
    def sw1(self) -> int:
        return self.raw[-2]

    @property
    def sw2(self) -> int:
        return self.raw[-1]

    @property
    def sw(self) -> int:
        return (self.sw1 << 8) | self.sw2

    @property
    def status_word(self) -> str:
        return self.raw[-2:].hex()

    @property
    def success(self) -> bool:
        return self.status_word == "9000"

    @property
    def has_continuation(self) -> bool:
        """61xx: SW2 more bytes can be fetched with GET RESPONSE."""
        return self.sw1 == 0x61

    @property
    def continuation_length(self) -> int:
        return self.sw2

    @property
    def wrong_length(self) -> bool:
        """6Cxx: Le was wrong, SW2 is the length the card wants."""
        return self.sw1 == 0x6C

    @property
    def corrected_length(self) -> int:
        return self.sw2

    def classify(self) -> Status:
        return classify(self.status_word)

    def to_hex(self) -> str:
        return self.raw.hex()

    def __repr__(self) -> str:
        sw = f"SW={self.sw:04X}"
        if self.data:
            return f"{self.data.hex(' ').upper()} {sw}"
        return sw

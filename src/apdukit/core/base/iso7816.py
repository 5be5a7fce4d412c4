from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from apdukit.core.base.instructions import INS_NAMES, Instruction
from apdukit.core.smartcard import (
    Cancelled,
    CommandApdu,
    ExchangeLimitExceeded,
    MaxRetriesExceeded,
    InvalidArgument,
    ResponseApdu,
)
from apdukit.core.smartcard.logging import PROTOCOL, RESET, TRACE, sw_color

lg = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_MAX_EXCHANGES = 32

# async callable carrying one command APDU to the card and back, e.g. Agent.transmit
Transmit = Callable[[bytes], Awaitable[bytes]]


class ISO7816:
    """ISO 7816-4 protocol operations over an async byte transport.

    ``issue_command`` resolves 61xx by fetching the remaining bytes with
    GET RESPONSE and 6Cxx by resending the same command with the Le the
    card asked for. Every other status word is returned to the caller.
    """

    def __init__(
        self,
        transmit: Transmit,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_exchanges: int = DEFAULT_MAX_EXCHANGES,
    ) -> None:
        if max_retries < 0:
            raise InvalidArgument(f"max_retries must be >= 0, got {max_retries}")
        if max_exchanges < 1:
            raise InvalidArgument(f"max_exchanges must be >= 1, got {max_exchanges}")
        self._transmit = transmit
        self.max_retries = max_retries
        self.max_exchanges = max_exchanges

    async def _send(self, label: str, command: CommandApdu) -> ResponseApdu:
        try:
            raw = await self._transmit(command.to_bytes())
        except Cancelled:
            raise
        except asyncio.CancelledError as exc:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # our own task is being cancelled (task.cancel, asyncio.timeout)
                raise
            raise Cancelled(f"{label} cancelled") from exc
        resp = ResponseApdu.parse(raw)
        lg.log(PROTOCOL, "%s %s%04X%s", label, sw_color(resp.sw1), resp.sw, RESET)
        return resp

    async def issue_command(self, command: CommandApdu, label: str | None = None) -> ResponseApdu:
        """Exchange one command, following 61xx and 6Cxx until a final status.

        The 6Cxx retry count starts over with each GET RESPONSE; the total
        number of transport calls is capped by ``max_exchanges``.
        """
        label = label or INS_NAMES.get(command.ins, f"INS {command.ins:02X}")
        retries = 0
        exchanges = 0
        while True:
            if exchanges >= self.max_exchanges:
                raise ExchangeLimitExceeded(self.max_exchanges)
            exchanges += 1
            resp = await self._send(label, command)

            if resp.has_continuation:
                lg.log(TRACE, "%d more bytes available", resp.continuation_length)
                command = self._get_response_command(resp.continuation_length)
                label = INS_NAMES[Instruction.GET_RESPONSE]
                retries = 0
            elif resp.wrong_length:
                if retries >= self.max_retries:
                    raise MaxRetriesExceeded(self.max_retries, resp)
                retries += 1
                lg.log(TRACE, "Le should be %02X, retry %d/%d",
                       resp.corrected_length, retries, self.max_retries)
                command.set_le(resp.corrected_length)
            else:
                return resp

    @staticmethod
    def _get_response_command(length: int) -> CommandApdu:
        return CommandApdu(cla=0x00, ins=Instruction.GET_RESPONSE, p1=0x00, p2=0x00, le=length)

    # -- commands --

    async def select_file(
        self, identifier: bytes, p1: int = 0x04, p2: int = 0x00,
    ) -> ResponseApdu:
        """SELECT FILE (00 A4). P1=selection method, P2=response control."""
        apdu = CommandApdu(cla=0x00, ins=Instruction.SELECT_FILE, p1=p1, p2=p2, data=identifier)
        return await self.issue_command(apdu, f"SELECT {bytes(identifier).hex().upper()}")

    async def get_response(self, length: int) -> ResponseApdu:
        """GET RESPONSE (00 C0), Le=length."""
        return await self.issue_command(self._get_response_command(length))

    async def read_record(self, sfi: int, record: int) -> ResponseApdu:
        """READ RECORD (00 B2) by record number from a short file identifier."""
        apdu = CommandApdu(
            cla=0x00, ins=Instruction.READ_RECORD,
            p1=record, p2=(sfi << 3) + 4, le=0x00,
        )
        return await self.issue_command(apdu, f"READ RECORD SFI={sfi:02X} record={record:02X}")

    async def get_data(self, p1: int, p2: int) -> ResponseApdu:
        """GET DATA (00 CA)."""
        apdu = CommandApdu(cla=0x00, ins=Instruction.GET_DATA, p1=p1, p2=p2, le=0x00)
        return await self.issue_command(apdu, f"GET DATA {p1:02X}{p2:02X}")

    async def read_binary(
        self, offset: int, length: int, *, sfi: int | None = None,
    ) -> ResponseApdu:
        """READ BINARY (00 B0). SFI in P1 bit 8 if given."""
        if sfi is not None:
            p1 = 0x80 | (sfi & 0x1F)
            p2 = offset & 0xFF
            label = f"READ BINARY SFI={sfi:02X} offset={offset:02X} le={length:02X}"
        else:
            p1 = (offset >> 8) & 0x7F
            p2 = offset & 0xFF
            label = f"READ BINARY offset={offset:04X} le={length:02X}"
        apdu = CommandApdu(cla=0x00, ins=Instruction.READ_BINARY, p1=p1, p2=p2, le=length)
        return await self.issue_command(apdu, label)

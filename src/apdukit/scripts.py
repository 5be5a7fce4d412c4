# filename : scripts.py


import logging

import click

from apdukit.core.base import DEFAULT_MAX_RETRIES
from apdukit.core.smartcard import CommandApdu, InvalidArgument
from apdukit.core.smartcard.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


class HexBytes(click.ParamType):
    """Hex string argument, spaces allowed."""

    name = "hex"

    def convert(self, value, param, ctx):
        if isinstance(value, bytes):
            return value
        try:
            return bytes.fromhex(value.replace(" ", ""))
        except ValueError:
            self.fail(f"'{value}' is not a hex string", param, ctx)


class HexByte(click.ParamType):
    """Single byte given in hex (A4, 0xA4)."""

    name = "byte"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            number = int(value, 16)
        except ValueError:
            self.fail(f"'{value}' is not a hex byte", param, ctx)
        if not 0 <= number <= 0xFF:
            self.fail(f"'{value}' does not fit in one byte", param, ctx)
        return number


HEX = HexBytes()
BYTE = HexByte()


def _run(ctx: click.Context, operation) -> None:
    from apdukit.app.session import session

    resp = session(operation, **ctx.obj)
    if resp is None:
        ctx.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw APDUs).")
@click.option("-r", "--reader", default=None, help="Use the first reader whose name contains this text.")
@click.option(
    "--max-retries",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_RETRIES,
    show_default=True,
    help="Resends allowed when the card answers 6Cxx.",
)
@click.pass_context
def apdukit(ctx, verbose, reader, max_retries):

    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )
    ctx.obj = {"reader": reader, "max_retries": max_retries}


@apdukit.command()
@click.argument("aid", type=HEX)
@click.option("--p1", type=BYTE, default="04", show_default=True, help="Selection method.")
@click.option("--p2", type=BYTE, default="00", show_default=True, help="Response control.")
@click.pass_context
def select(ctx, aid, p1, p2):
    """SELECT FILE by AID or file identifier."""
    _run(ctx, lambda iso: iso.select_file(aid, p1, p2))


@apdukit.command("read-record")
@click.argument("sfi", type=click.IntRange(0, 30))
@click.argument("record", type=click.IntRange(0, 255))
@click.pass_context
def read_record(ctx, sfi, record):
    """READ RECORD from a short file identifier."""
    _run(ctx, lambda iso: iso.read_record(sfi, record))


@apdukit.command("read-binary")
@click.argument("offset", type=click.IntRange(0, 0x7FFF))
@click.argument("length", type=click.IntRange(0, 255))
@click.option("--sfi", type=BYTE, default=None, help="Short file identifier (hex).")
@click.pass_context
def read_binary(ctx, offset, length, sfi):
    """READ BINARY from the current or a short-identified EF."""
    _run(ctx, lambda iso: iso.read_binary(offset, length, sfi=sfi))


@apdukit.command("get-data")
@click.argument("p1", type=BYTE)
@click.argument("p2", type=BYTE)
@click.pass_context
def get_data(ctx, p1, p2):
    """GET DATA for the object tagged P1 P2."""
    _run(ctx, lambda iso: iso.get_data(p1, p2))


@apdukit.command()
@click.argument("command", type=HEX)
@click.pass_context
def apdu(ctx, command):
    """Send a raw command APDU (hex)."""
    try:
        parsed = CommandApdu.from_bytes(command)
    except InvalidArgument as exc:
        raise click.BadParameter(str(exc), param_hint="'COMMAND'") from exc
    _run(ctx, lambda iso: iso.issue_command(parsed))


@apdukit.command()
@click.option("--aid", type=HEX, default=None, help="AID to select (default: 1PAY.SYS.DDF01).")
@click.pass_context
def watch(ctx, aid):
    """Select an application on every card inserted."""
    from apdukit.app.session import PSE, watch as watch_cards

    watch_cards(aid or PSE, max_retries=ctx.obj["max_retries"])

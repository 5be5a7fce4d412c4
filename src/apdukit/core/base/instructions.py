"""ISO 7816-4 instruction codes."""

from enum import IntEnum


class Instruction(IntEnum):
    APPEND_RECORD = 0xE2
    ENVELOPE = 0xC2
    ERASE_BINARY = 0x0E
    EXTERNAL_AUTHENTICATE = 0x82
    GET_CHALLENGE = 0x84
    GET_DATA = 0xCA
    GET_RESPONSE = 0xC0
    INTERNAL_AUTHENTICATE = 0x88
    MANAGE_CHANNEL = 0x70
    PUT_DATA = 0xDA
    READ_BINARY = 0xB0
    READ_RECORD = 0xB2
    SELECT_FILE = 0xA4
    UPDATE_BINARY = 0xD6
    UPDATE_RECORD = 0xDC
    VERIFY = 0x20
    WRITE_BINARY = 0xD0
    WRITE_RECORD = 0xD2


INS_NAMES: dict[int, str] = {ins.value: ins.name.replace("_", " ") for ins in Instruction}

"""ISO 7816-4 status word meanings.

Entries are checked in order against the lowercase 4-digit status word.
Exact codes come before the two-digit family wildcards so a family entry
never hides a more specific meaning.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

UNKNOWN = "Unknown"

_ENTRIES: tuple[tuple[str, str], ...] = (
    # normal processing
    ("9000", "Normal processing"),
    ("61..", "Normal processing, SW2 indicates the number of response bytes still available"),
    # warnings, state of non-volatile memory unchanged
    ("6200", "Warning: no information given"),
    ("6281", "Warning: part of returned data may be corrupted"),
    ("6282", "Warning: end of file or record reached before reading Le bytes"),
    ("6283", "Warning: selected file invalidated"),
    ("6284", "Warning: file control information not formatted according to ISO 7816-4"),
    ("6285", "Warning: selected file in termination state"),
    ("6286", "Warning: no input data available from a sensor on the card"),
    # warnings, state of non-volatile memory changed
    ("6300", "Warning: authentication failed, no information given"),
    ("6381", "Warning: file filled up by the last write"),
    ("6382", "Warning: execution successful after retry"),
    ("63c.", "Warning: authentication failed, SW2 low nibble is the remaining retry counter"),
    # execution errors
    ("6400", "Execution error: state of non-volatile memory unchanged"),
    ("6401", "Execution error: immediate response required by the card"),
    ("6500", "Execution error: no information given"),
    ("6581", "Execution error: memory failure"),
    # checking errors
    ("6700", "Checking error: wrong length"),
    ("6800", "Checking error: functions in CLA not supported"),
    ("6881", "Checking error: logical channel not supported"),
    ("6882", "Checking error: secure messaging not supported"),
    ("6883", "Checking error: last command of the chain expected"),
    ("6884", "Checking error: command chaining not supported"),
    ("6900", "Checking error: command not allowed, no information given"),
    ("6981", "Checking error: command incompatible with file structure"),
    ("6982", "Checking error: security status not satisfied"),
    ("6983", "Checking error: authentication method blocked"),
    ("6984", "Checking error: reference data not usable"),
    ("6985", "Checking error: conditions of use not satisfied"),
    ("6986", "Checking error: command not allowed, no current EF"),
    ("6987", "Checking error: expected secure messaging data objects missing"),
    ("6988", "Checking error: incorrect secure messaging data objects"),
    ("6a00", "Checking error: wrong parameters P1-P2, no information given"),
    ("6a80", "Checking error: incorrect parameters in the command data field"),
    ("6a81", "Checking error: function not supported"),
    ("6a82", "Checking error: file or application not found"),
    ("6a83", "Checking error: record not found"),
    ("6a84", "Checking error: not enough memory space in the file"),
    ("6a85", "Checking error: Nc inconsistent with TLV structure"),
    ("6a86", "Checking error: incorrect parameters P1-P2"),
    ("6a87", "Checking error: Nc inconsistent with parameters P1-P2"),
    ("6a88", "Checking error: referenced data or reference data not found"),
    ("6a89", "Checking error: file already exists"),
    ("6a8a", "Checking error: DF name already exists"),
    ("6b00", "Checking error: wrong parameters P1-P2"),
    ("6d00", "Checking error: instruction code not supported or invalid"),
    ("6e00", "Checking error: class not supported"),
    ("6f00", "Checking error: no precise diagnosis"),
    # families
    ("62..", "Warning: state of non-volatile memory unchanged"),
    ("63..", "Warning: state of non-volatile memory changed"),
    ("64..", "Execution error: state of non-volatile memory unchanged"),
    ("65..", "Execution error: state of non-volatile memory changed"),
    ("66..", "Execution error: security related issue"),
    ("67..", "Checking error: wrong length"),
    ("68..", "Checking error: functions in CLA not supported (see SW2)"),
    ("69..", "Checking error: command not allowed (see SW2)"),
    ("6a..", "Checking error: wrong parameters P1-P2 (see SW2)"),
    ("6b..", "Checking error: wrong parameters P1-P2"),
    ("6c..", "Checking error: wrong Le field, SW2 indicates the exact length"),
    ("6d..", "Checking error: instruction code not supported or invalid"),
    ("6e..", "Checking error: class not supported"),
    ("6f..", "Checking error: no precise diagnosis"),
)

STATUS_TABLE: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern), meaning) for pattern, meaning in _ENTRIES
)


@dataclass(frozen=True)
class Status:
    """A status word and its human readable meaning."""

    code: str
    meaning: str

    def __str__(self) -> str:
        return f"{self.code.upper()} {self.meaning}"


def classify(status_word: str) -> Status:
    """Look up the meaning of a 4-digit hex status word."""
    code = status_word.lower()
    for pattern, meaning in STATUS_TABLE:
        if pattern.fullmatch(code):
            return Status(code=code, meaning=meaning)
    return Status(code=code, meaning=UNKNOWN)

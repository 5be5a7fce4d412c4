from __future__ import annotations

import logging

TRACE = 15
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")

GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"


def sw_color(sw1: int) -> str:
    """ANSI colour for a status word: green for 90xx/61xx, red otherwise."""
    if sw1 in (0x90, 0x61):
        return GREEN
    return RED

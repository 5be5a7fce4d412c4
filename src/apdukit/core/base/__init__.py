from apdukit.core.base.agent import Agent
from apdukit.core.base.instructions import Instruction
from apdukit.core.base.iso7816 import (
    DEFAULT_MAX_EXCHANGES,
    DEFAULT_MAX_RETRIES,
    ISO7816,
    Transmit,
)

__all__ = [
    "Agent",
    "DEFAULT_MAX_EXCHANGES",
    "DEFAULT_MAX_RETRIES",
    "ISO7816",
    "Instruction",
    "Transmit",
]

from __future__ import annotations

import pytest


class ScriptedTransport:
    """Replays canned responses and records every command it was given.

    The last response repeats once the script runs out.
    """

    def __init__(self, *responses: bytes) -> None:
        self._responses = list(responses)
        self.commands: list[bytes] = []

    async def transmit(self, command: bytes) -> bytes:
        self.commands.append(bytes(command))
        if len(self._responses) > 1:
            return self._responses.pop(0)
        return self._responses[0]


@pytest.fixture
def scripted():
    return ScriptedTransport

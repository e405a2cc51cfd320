import io
from typing import Optional

import pytest

from mastermind.game import score
from mastermind.protocol import LineChannel, format_response


class CodemakerChannel(LineChannel):
    """In-process codemaker: scores each guess line against a fixed secret."""

    def __init__(self, secret: list[int]):
        self.secret = list(secret)
        self.guesses: list[list[int]] = []
        self._pending: Optional[str] = None

    def send_line(self, line: str) -> None:
        guess = [int(x) for x in line.split()]
        self.guesses.append(guess)
        self._pending = format_response(score(self.secret, guess))

    def read_line(self) -> Optional[str]:
        line, self._pending = self._pending, None
        return line


class ScriptedChannel(LineChannel):
    """Replies with canned lines in order, then reports end of channel."""

    def __init__(self, replies: list[str]):
        self.replies = list(replies)
        self.sent: list[str] = []

    def send_line(self, line: str) -> None:
        self.sent.append(line)

    def read_line(self) -> Optional[str]:
        if not self.replies:
            return None
        return self.replies.pop(0)


class ClosedWriter(io.StringIO):
    """A writer whose reader has gone away."""

    def flush(self):
        raise BrokenPipeError(32, "Broken pipe")


@pytest.fixture
def codemaker():
    return CodemakerChannel


@pytest.fixture
def scripted():
    return ScriptedChannel


@pytest.fixture
def closed_writer():
    return ClosedWriter()

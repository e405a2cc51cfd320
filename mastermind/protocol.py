"""Line protocol: guess/response codecs and the channels that carry them."""

import re
import subprocess
from typing import Optional, TextIO

from .game import ConfigError, ProtocolError


_INT_TOKEN = re.compile(r"[+-]?[0-9]+")


def _parse_ints(line: str) -> list[int]:
    """Split a line on whitespace and convert every token to int."""
    tokens = line.split()
    for token in tokens:
        # ASCII digits only; int() would also take "1_0" and non-Latin digits
        if not _INT_TOKEN.fullmatch(token):
            raise ProtocolError(f"Non-numeric token in line: {line!r}")
    return [int(token) for token in tokens]


def format_code(code: list[int]) -> str:
    """Render a guess as space-separated integers, e.g. '1 3 3 5'."""
    return " ".join(str(color) for color in code)


def format_response(response: tuple[int, int]) -> str:
    """Render feedback as 'black white'."""
    black, white = response
    return f"{black} {white}"


def parse_guess(line: str, num_colors: int, num_pegs: int) -> list[int]:
    """
    Parse a guess line sent to the codemaker.

    Raises:
        ProtocolError: wrong token count, non-numeric token or a color
            outside [0, num_colors)
    """
    guess = _parse_ints(line)
    if len(guess) != num_pegs:
        raise ProtocolError(f"Guess must have exactly {num_pegs} colors, got {len(guess)}")
    if not all(0 <= color < num_colors for color in guess):
        raise ProtocolError(f"Guess colors must be between 0 and {num_colors - 1}: {guess}")
    return guess


def parse_response(line: str, num_pegs: int) -> tuple[int, int]:
    """
    Parse a 'black white' line sent to the codebreaker.

    Raises:
        ProtocolError: anything other than two non-negative integers whose
            sum does not exceed num_pegs
    """
    values = _parse_ints(line)
    if len(values) != 2:
        raise ProtocolError(f"Response must be 'black white', got {line!r}")
    black, white = values
    if black < 0 or white < 0 or black + white > num_pegs:
        raise ProtocolError(f"Impossible response for {num_pegs} pegs: {black} {white}")
    return black, white


class LineChannel:
    """Bidirectional line transport between the two players."""

    def send_line(self, line: str) -> None:
        raise NotImplementedError("Override in subclass")

    def read_line(self) -> Optional[str]:
        """Return the next line without its newline, or None at end of channel."""
        raise NotImplementedError("Override in subclass")


class StreamChannel(LineChannel):
    """Channel over a pair of text streams, normally stdin and stdout."""

    def __init__(self, reader: TextIO, writer: TextIO):
        self.reader = reader
        self.writer = writer

    def send_line(self, line: str) -> None:
        try:
            self.writer.write(line + "\n")
            self.writer.flush()
        except BrokenPipeError:
            raise ProtocolError("Peer closed the channel")

    def read_line(self) -> Optional[str]:
        line = self.reader.readline()
        if not line:
            return None
        return line.rstrip("\r\n")


class SubprocessChannel(StreamChannel):
    """Channel to a peer program started as a subprocess, over its pipes."""

    def __init__(self, cmd: list[str]):
        """
        Start the peer process.

        Args:
            cmd: Command line of the peer, e.g. ['mastermind', '6', '1', '3', '3', '5']
        """
        self.cmd = cmd
        try:
            self.process = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except FileNotFoundError:
            raise ConfigError(f"Peer program not found: {cmd[0]}")
        super().__init__(self.process.stdout, self.process.stdin)

    def close(self) -> Optional[int]:
        """Close the pipes and wait for the peer. Returns its exit status."""
        for stream in (self.process.stdin, self.process.stdout):
            try:
                stream.close()
            except BrokenPipeError:
                pass
        return self.process.wait()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class TranscriptChannel(LineChannel):
    """Wraps another channel and records every line sent and received."""

    def __init__(self, inner: LineChannel):
        self.inner = inner
        self.sent: list[str] = []
        self.received: list[Optional[str]] = []

    def send_line(self, line: str) -> None:
        self.sent.append(line)
        self.inner.send_line(line)

    def read_line(self) -> Optional[str]:
        line = self.inner.read_line()
        self.received.append(line)
        return line


def exchange(channel: LineChannel, guess: list[int], num_pegs: int) -> tuple[int, int]:
    """
    Send one guess and block until its feedback arrives.

    Raises:
        ProtocolError: the channel ended or the reply is malformed
    """
    channel.send_line(format_code(guess))
    line = channel.read_line()
    if line is None:
        raise ProtocolError("Channel closed while waiting for a response")
    return parse_response(line, num_pegs)

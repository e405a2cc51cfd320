"""Game session management and result tracking."""

from dataclasses import dataclass, asdict
from typing import Optional
import time

from .game import ConfigError, GameConfig, MastermindError, ProtocolError, is_match, score
from .protocol import (
    LineChannel,
    TranscriptChannel,
    format_response,
    parse_guess,
)
from .solver import find_unique_colors, solve_positions


@dataclass
class SessionResult:
    """Complete result of a game session."""
    role: str  # "codebreaker" | "codemaker"
    config: dict  # GameConfig as dict
    outcome: str  # "solved" | "error"
    secret: Optional[list[int]]
    turns: list[dict]
    error: Optional[str]
    duration_seconds: float

    @property
    def ok(self) -> bool:
        return self.outcome == "solved"


def _turns_from_transcript(transcript: TranscriptChannel, guess_side: str) -> list[dict]:
    """Pair each guess line with its response line (or None if it never came)."""
    if guess_side == "sent":
        guesses, responses = transcript.sent, transcript.received
    else:
        guesses, responses = transcript.received, transcript.sent

    turns = []
    for i, guess in enumerate(guesses):
        if guess is None:
            break
        response = responses[i] if i < len(responses) else None
        turns.append({"turn_number": i + 1, "guess": guess, "response": response})
    return turns


class CodebreakerSession:
    """Deduces the peer's secret: monochrome probing, then localization."""

    def __init__(self, game_config: GameConfig, channel: LineChannel):
        """
        Initialize codebreaker session.

        Args:
            game_config: Game configuration
            channel: Line channel to the codemaker
        """
        self.game_config = game_config
        self.channel = channel

    def run(self) -> SessionResult:
        """Play until the secret is known and return results."""
        start_time = time.time()
        transcript = TranscriptChannel(self.channel)
        k, n = self.game_config.num_colors, self.game_config.num_pegs

        secret = None
        error = None
        try:
            self.game_config.validate()
            discovery = find_unique_colors(k, n, transcript)
            if discovery.solved:
                secret = discovery.secret
            else:
                secret = solve_positions(n, discovery, transcript)
        except MastermindError as e:
            error = str(e)

        return SessionResult(
            role="codebreaker",
            config=asdict(self.game_config),
            outcome="error" if error else "solved",
            secret=secret,
            turns=_turns_from_transcript(transcript, "sent"),
            error=error,
            duration_seconds=round(time.time() - start_time, 3),
        )


class CodemakerSession:
    """Holds a secret and scores incoming guesses until one matches."""

    def __init__(self, game_config: GameConfig, secret: list[int], channel: LineChannel):
        """
        Initialize codemaker session.

        Args:
            game_config: Game configuration
            secret: Pre-validated secret code
            channel: Line channel to the codebreaker
        """
        self.game_config = game_config
        self.secret = secret
        self.channel = channel

    def run(self) -> SessionResult:
        """Answer guesses until a match and return results."""
        start_time = time.time()
        transcript = TranscriptChannel(self.channel)

        error = None
        try:
            self._play(transcript)
        except MastermindError as e:
            error = str(e)

        return SessionResult(
            role="codemaker",
            config=asdict(self.game_config),
            outcome="error" if error else "solved",
            secret=self.secret,
            turns=_turns_from_transcript(transcript, "received"),
            error=error,
            duration_seconds=round(time.time() - start_time, 3),
        )

    def _play(self, channel: LineChannel) -> None:
        self.game_config.validate()
        problem = self.game_config.validate_code(self.secret)
        if problem:
            raise ConfigError(f"Invalid secret: {problem}")

        k, n = self.game_config.num_colors, self.game_config.num_pegs
        while True:
            line = channel.read_line()
            if line is None:
                raise ProtocolError("Input ended before the secret was guessed")

            guess = parse_guess(line, k, n)
            response = score(self.secret, guess)
            channel.send_line(format_response(response))

            if is_match(response, n):
                return

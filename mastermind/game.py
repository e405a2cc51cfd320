"""Core Mastermind rules: configuration limits and peg scoring."""

from collections import Counter
from dataclasses import dataclass
from typing import Optional


MIN_COLORS = 2
MAX_COLORS = 256
MIN_PEGS = 2
MAX_PEGS = 10
MAX_SEARCH_SPACE = 1 << 24  # cap on k ** n


class MastermindError(Exception):
    """Base exception for a failed game session."""
    pass


class ConfigError(MastermindError):
    """Raised when the color count, code length or secret is unusable."""
    pass


class ProtocolError(MastermindError):
    """Raised when the peer sends something a compliant player never would."""
    pass


def validate_constraints(k: int, n: int) -> bool:
    """
    Check that k colors and n pegs keep the search space bounded.

    k ** n is computed by squaring and gives up as soon as the running
    product passes MAX_SEARCH_SPACE, so it never builds a huge integer.
    """
    if not (MIN_COLORS <= k <= MAX_COLORS and MIN_PEGS <= n <= MAX_PEGS):
        return False

    result, factor, exponent = 1, k, n
    while exponent > 0:
        if exponent % 2 == 1:
            result *= factor
            if result > MAX_SEARCH_SPACE:
                return False
        exponent //= 2
        if exponent > 0:
            factor *= factor
    return True


def score(secret: list[int], guess: list[int]) -> tuple[int, int]:
    """
    Calculate black and white pegs using standard Mastermind rules.

    Algorithm:
    1. Count exact position matches (black pegs)
    2. Count colors of the remaining positions on both sides
    3. White pegs are the per-color overlap of those counts

    Returns:
        (black_pegs, white_pegs)
    """
    if len(secret) != len(guess):
        raise ValueError("Secret and guess must be the same length")

    black = 0
    secret_remaining = Counter()
    guess_remaining = Counter()

    for s, g in zip(secret, guess):
        if s == g:
            black += 1
        else:
            secret_remaining[s] += 1
            guess_remaining[g] += 1

    white = sum((secret_remaining & guess_remaining).values())
    return black, white


def is_match(response: tuple[int, int], num_pegs: int) -> bool:
    """A response ends the game when every peg is black."""
    return response == (num_pegs, 0)


@dataclass
class GameConfig:
    """Configuration for a Mastermind game."""
    num_colors: int
    num_pegs: int

    def validate(self) -> None:
        """Raise ConfigError unless the configuration passes validate_constraints."""
        if not validate_constraints(self.num_colors, self.num_pegs):
            raise ConfigError(
                f"Unsupported game: {self.num_colors} colors, {self.num_pegs} pegs "
                f"(need {MIN_COLORS}-{MAX_COLORS} colors, {MIN_PEGS}-{MAX_PEGS} pegs "
                f"and at most {MAX_SEARCH_SPACE} codes)"
            )

    def validate_code(self, code: list[int]) -> Optional[str]:
        """Validate code shape and values. Returns error message or None."""
        if len(code) != self.num_pegs:
            return f"Code must have exactly {self.num_pegs} positions, got {len(code)}"

        if not all(0 <= x < self.num_colors for x in code):
            return f"All values must be between 0 and {self.num_colors - 1}"

        return None

"""
Codebreaker deduction: identify the colors, then localize them.

Phase 1 (find_unique_colors) probes the secret with monochrome guesses.
Each probe's black count is that color's multiplicity in the secret, so
after at most k probes the positions are partitioned by color.

Phase 2 (solve_positions) fixes one position at a time. The guess is the
base color everywhere except the position under test, which holds a
candidate. Relative to the baseline count of the all-base probe, the black
count goes up by one if the candidate is right, down by one if the base
color is right, and stays put otherwise.
"""

from dataclasses import dataclass, field
from typing import Optional

from .game import ProtocolError, is_match
from .protocol import LineChannel, exchange


@dataclass
class Discovery:
    """Result of monochrome probing."""
    counts: dict[int, int] = field(default_factory=dict)  # color -> black pegs
    baseline: int = 0
    solved: bool = False  # the secret is a single repeated color
    secret: Optional[list[int]] = None  # set when solved

    @property
    def colors(self) -> list[int]:
        """Discovered colors in ascending order."""
        return sorted(self.counts)

    @property
    def base(self) -> int:
        """
        The smallest discovered color.

        The baseline count belongs to this color, so the positional probes
        must be built on it, not on whichever color happened to be seen first.
        """
        return min(self.counts)


def find_unique_colors(k: int, n: int, channel: LineChannel) -> Discovery:
    """
    Probe colors 0..k-1 with monochrome guesses until every peg is attributed.

    Returns:
        Discovery with the per-color counts and the baseline, or with
        solved=True if one probe matched the whole secret.

    Raises:
        ProtocolError: a monochrome probe got white pegs, or the black
            counts do not add up to n
    """
    discovery = Discovery()
    total = 0

    for color in range(k):
        black, white = exchange(channel, [color] * n, n)

        if black == n:
            return Discovery(counts={color: n}, baseline=n, solved=True, secret=[color] * n)

        if white > 0:
            raise ProtocolError(f"Monochrome probe of color {color} scored {white} white pegs")

        if black > 0:
            if not discovery.counts:
                discovery.baseline = black
            discovery.counts[color] = black

        total += black
        if total >= n:
            break

    if total != n:
        raise ProtocolError(f"Monochrome probes accounted for {total} of {n} pegs")

    return discovery


def solve_positions(n: int, discovery: Discovery, channel: LineChannel) -> list[int]:
    """
    Reconstruct the secret one position at a time and verify it.

    Returns:
        The secret code.

    Raises:
        ProtocolError: a position could not be resolved, or the final
            verification guess did not score (n, 0)
    """
    base = discovery.base
    candidates = [color for color in discovery.colors if color != base]
    answer: list[Optional[int]] = [None] * n

    for pos in range(n):
        for candidate in candidates:
            guess = [base] * n
            guess[pos] = candidate
            response = exchange(channel, guess, n)

            # The probe was the secret itself; the codemaker is done.
            if is_match(response, n):
                return guess

            black = response[0]
            if black > discovery.baseline:
                answer[pos] = candidate
                break
            if black < discovery.baseline:
                answer[pos] = base
                break

        if answer[pos] is None:
            raise ProtocolError(f"No candidate color changed the black count at position {pos}")

    response = exchange(channel, answer, n)
    if not is_match(response, n):
        raise ProtocolError(f"Verification guess {answer} scored {response}, expected ({n}, 0)")

    return answer

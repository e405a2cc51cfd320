"""CLI entry point for the Mastermind line-protocol player."""

import argparse
import shlex
import sys
from typing import Optional

from tabulate import tabulate

from .game import ConfigError, GameConfig
from .protocol import StreamChannel, SubprocessChannel
from .runner import CodebreakerSession, CodemakerSession, SessionResult


class _Parser(argparse.ArgumentParser):
    """Argument parser that reports usage errors the same way as game errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: {message}", file=sys.stderr)
        print("ERROR", file=sys.stderr)
        sys.exit(1)


def parse_int(value: str, what: str) -> int:
    """Parse one integer argument."""
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{what} must be an integer, got {value!r}")


def build_config(colors: str, values: list[str]) -> tuple[GameConfig, Optional[list[int]]]:
    """
    Turn positional arguments into a game configuration.

    A single value after the color count is the code length (codebreaker).
    Several values are the secret itself (codemaker); its length is the
    code length.

    Returns:
        (config, secret) where secret is None in codebreaker mode
    """
    num_colors = parse_int(colors, "Color count")

    if len(values) == 1:
        config = GameConfig(num_colors=num_colors, num_pegs=parse_int(values[0], "Code length"))
        config.validate()
        return config, None

    secret = [parse_int(v, "Secret color") for v in values]
    config = GameConfig(num_colors=num_colors, num_pegs=len(secret))
    config.validate()
    problem = config.validate_code(secret)
    if problem:
        raise ConfigError(f"Invalid secret: {problem}")
    return config, secret


def print_report(result: SessionResult, peer_status: Optional[int] = None) -> None:
    """Print a session summary and its turns to stderr."""
    config = result.config
    print(f"Role: {result.role}", file=sys.stderr)
    print(f"Config: {config['num_colors']} colors, {config['num_pegs']} pegs", file=sys.stderr)
    if result.ok:
        print(f"Solved in {len(result.turns)} turns ({result.duration_seconds}s)", file=sys.stderr)
    else:
        print(f"Error: {result.error}", file=sys.stderr)
    if result.secret is not None:
        print(f"Secret: {result.secret}", file=sys.stderr)
    if peer_status is not None:
        print(f"Peer exit status: {peer_status}", file=sys.stderr)

    if result.turns:
        rows = [
            [turn["turn_number"], turn["guess"], turn["response"] or "-"]
            for turn in result.turns
        ]
        print(tabulate(rows, headers=["Turn", "Guess", "Response"], tablefmt="simple"),
              file=sys.stderr)


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = _Parser(
        prog="mastermind",
        description="Play Mastermind over stdin/stdout as codebreaker or codemaker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Codebreaker: 6 colors, 4 pegs; guesses on stdout, 'black white' on stdin
  mastermind 6 4

  # Codemaker: 6 colors, secret 1 3 3 5; guesses on stdin, 'black white' on stdout
  mastermind 6 1 3 3 5

  # Codebreaker against a codemaker process
  mastermind 6 4 --against "mastermind 6 1 3 3 5" --verbose
        """
    )

    parser.add_argument('colors', metavar='K',
                        help='Number of colors (2-256)')
    parser.add_argument('values', metavar='N|COLOR', nargs='+',
                        help='Code length (codebreaker) or the secret colors (codemaker)')

    parser.add_argument('--against', type=str, default=None, metavar='CMD',
                        help='Run the codebreaker against a codemaker command instead of stdin/stdout')
    parser.add_argument('--verbose', action='store_true',
                        help='Print a session summary and turn table to stderr')

    args = parser.parse_args(argv)

    try:
        game_config, secret = build_config(args.colors, args.values)
    except ConfigError as e:
        if args.verbose:
            print(f"Error: {e}", file=sys.stderr)
        print("ERROR", file=sys.stderr)
        return 1

    if secret is not None and args.against:
        print("Error: --against only applies to codebreaker mode", file=sys.stderr)
        print("ERROR", file=sys.stderr)
        return 1

    peer_status = None
    if secret is not None:
        channel = StreamChannel(sys.stdin, sys.stdout)
        result = CodemakerSession(game_config, secret, channel).run()
    elif args.against:
        try:
            peer = SubprocessChannel(shlex.split(args.against))
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            print("ERROR", file=sys.stderr)
            return 1
        with peer:
            result = CodebreakerSession(game_config, peer).run()
        peer_status = peer.process.returncode
    else:
        channel = StreamChannel(sys.stdin, sys.stdout)
        result = CodebreakerSession(game_config, channel).run()

    if args.verbose:
        print_report(result, peer_status)

    if not result.ok:
        print("ERROR", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

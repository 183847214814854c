# cli.py
# Terminal front-end: reads the two word lists and prints the solved table.

import argparse
import logging
import sys

from solver import InvalidInput, solve_cryptarithm


def format_table(lhs_words, rhs_words, solution):
    """Words right-justified above a dash row above their digit substitutions."""
    words = list(lhs_words) + list(rhs_words)
    digits = [solution.digits_for(w) for w in words]
    width = max(len(d) for d in digits)

    lines = [""]
    for w in words:
        lines.append(w.rjust(width))
    lines.append("-" * width)
    for d in digits:
        lines.append(d.rjust(width))
    return "\n".join(lines)


def read_words(prompt, stream):
    print(prompt)
    line = stream.readline()
    return line.split()


def timeout_arg(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"timeout must not be negative, got {value}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(description="Solve an addition cryptarithm such as SEND + MORE = MONEY.")
    parser.add_argument("--lhs", nargs="+", metavar="WORD", help="words summed on the left-hand side")
    parser.add_argument("--rhs", nargs="+", metavar="WORD", help="words summed on the right-hand side")
    parser.add_argument("--timeout-ms", type=timeout_arg, default=None, help="give up after this many milliseconds")
    parser.add_argument("--trace", default=None, metavar="PATH", help="write the solve trace to PATH")
    parser.add_argument("-v", "--verbose", action="store_true", help="log solver progress")
    return parser


def main(argv=None, stdin=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    stdin = stdin if stdin is not None else sys.stdin

    lhs_words = args.lhs
    if lhs_words is None:
        lhs_words = read_words("Enter the left-hand side words (space-separated):", stdin)
    rhs_words = args.rhs
    if rhs_words is None:
        rhs_words = read_words("Enter the right-hand side words (space-separated):", stdin)

    try:
        outcome = solve_cryptarithm(lhs_words, rhs_words, timeout_ms=args.timeout_ms, trace_path=args.trace)
    except InvalidInput as e:
        print(f"Invalid input: {e}")
        return 2

    if outcome.ok:
        print(format_table(lhs_words, rhs_words, outcome))
    else:
        print("No solution found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

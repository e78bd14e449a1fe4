"""
Offline runner: benchmark a policy, review a game or build a strategy table.

Usage:
    python -m wordle_engine benchmark --answers words/answers.txt --valid words/allowed_guesses.txt
    python -m wordle_engine benchmark ... --games 5000 --workers 8 --strategy data/v1.txt
    python -m wordle_engine benchmark ... --openers salet
    python -m wordle_engine review ... --guesses soare,clint,night --games 100
    python -m wordle_engine build-strategy ... --tag v1 --output data/v1.txt
"""

import argparse
import logging
import os
import sys

from .config import CONFIG
from .lexicon import Lexicon
from .review import review_game
from .scoring import METHODS
from .selector import GuessSelector
from .simulator import build_strategy_table, print_results, simulate
from .strategy import StrategyTable

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_ANSWERS = os.path.join(BASE_DIR, "words", "answers.txt")
DEFAULT_VALID = os.path.join(BASE_DIR, "words", "allowed_guesses.txt")


def _word_list(text: str):
    return [w.strip().lower() for w in text.split(',') if w.strip()]


def _add_common(parser: argparse.ArgumentParser):
    parser.add_argument("--answers", default=DEFAULT_ANSWERS,
                        help="Answer list, one word per line")
    parser.add_argument("--valid",
                        help="Valid guess list, one word per line "
                             "(default: words/allowed_guesses.txt when present)")
    parser.add_argument("--budget", type=int, default=CONFIG["budget"],
                        help=f"Guesses scored per turn (default: {CONFIG['budget']})")
    parser.add_argument("--scorer", choices=sorted(METHODS), default=CONFIG["scorer"])
    parser.add_argument("--verbose", action="store_true", help="Log progress")


def _load_policy(args) -> GuessSelector:
    valid = args.valid
    if valid is None and os.path.exists(DEFAULT_VALID):
        valid = DEFAULT_VALID
    lexicon = Lexicon.from_files(args.answers, valid)
    print(f"Answers: {len(lexicon.answers)}, Guesses: {len(lexicon.valid)}")

    strategy = None
    if getattr(args, "strategy", None):
        strategy = StrategyTable.from_file(args.strategy)
    return GuessSelector(lexicon, budget=args.budget, scorer=args.scorer, strategy=strategy)


def cmd_benchmark(args):
    policy = _load_policy(args)
    result = simulate(args.games or len(policy.lexicon.answers), policy,
                      max_turns=args.max_turns, seed=args.seed, workers=args.workers,
                      openers=args.openers)
    print_results(result)


def cmd_review(args):
    policy = _load_policy(args)
    review = review_game(args.guesses, policy, simulate_games=args.games)
    print(review.to_text(), end='')


def cmd_build_strategy(args):
    policy = _load_policy(args)
    table = build_strategy_table(policy, version=args.tag, max_depth=args.max_depth,
                                 min_candidates=args.min_candidates)
    table.save(args.output)
    print(f"Strategy table '{table.version}': {len(table)} states -> {args.output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordle_engine", description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    sub = parser.add_subparsers(dest="command", required=True)

    bench = sub.add_parser("benchmark", help="Self-play games and print the distribution")
    _add_common(bench)
    bench.add_argument("--games", type=int, default=0,
                       help="Games to play (default: one per answer)")
    bench.add_argument("--max-turns", type=int, default=CONFIG["max_turns"])
    bench.add_argument("--seed", type=int, default=CONFIG["random_seed"])
    bench.add_argument("--workers", type=int, default=1,
                       help="Worker processes (each runs single-threaded kernels)")
    bench.add_argument("--openers", type=_word_list, default=[],
                       help="Comma-separated guesses forced on the first turns")
    bench.add_argument("--strategy", help="Strategy table file")
    bench.set_defaults(func=cmd_benchmark)

    review = sub.add_parser("review", help="Compare a finished game against the policy")
    _add_common(review)
    review.add_argument("--guesses", type=_word_list, required=True,
                        help="Comma-separated guesses played, the answer last")
    review.add_argument("--games", type=int, default=0,
                        help="Self-play games against the same answer")
    review.add_argument("--strategy", help="Strategy table file")
    review.set_defaults(func=cmd_review)

    build = sub.add_parser("build-strategy", help="Precompute a strategy table")
    _add_common(build)
    build.add_argument("--tag", required=True, help="Version tag written into the table")
    build.add_argument("--output", required=True, help="Where to write the table")
    build.add_argument("--max-depth", type=int, default=CONFIG["strategy_max_depth"])
    build.add_argument("--min-candidates", type=int, default=CONFIG["strategy_min_candidates"])
    build.set_defaults(func=cmd_build_strategy)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    for path in (args.answers, args.valid, getattr(args, "strategy", None)):
        if path is not None and not os.path.exists(path):
            parser.error(f"file not found: {path}")

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s: %(message)s")

    args.func(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())

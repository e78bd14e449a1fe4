"""
Simulator
=========

Self-plays full games with a guessing policy to measure its turn-count
distribution, and walks the game tree to build strategy tables offline.
"""

import logging
import random
import time
from collections import Counter, deque
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numba

from .config import CONFIG
from .filter import narrow, partition
from .response import evaluate
from .selector import GuessSelector
from .strategy import StrategyTable, state_key

logger = logging.getLogger(__name__)


# ============================================================================
# RESULTS
# ============================================================================

@dataclass
class SimulationResult:
    """Turns-to-solve histogram; bucket max_turns + 1 holds the losses."""
    histogram: Dict[int, int]
    max_turns: int
    elapsed: float = 0.0

    @property
    def loss_bucket(self) -> int:
        return self.max_turns + 1

    @property
    def games(self) -> int:
        return sum(self.histogram.values())

    @property
    def losses(self) -> int:
        return self.histogram.get(self.loss_bucket, 0)

    @property
    def solve_rate(self) -> float:
        return (self.games - self.losses) / self.games if self.games else 0.0

    @property
    def average(self) -> float:
        """Mean turns per game, losses counted as max_turns + 1."""
        if not self.games:
            return 0.0
        return sum(turns * count for turns, count in self.histogram.items()) / self.games

    def to_dict(self) -> Dict:
        return {
            'games': self.games,
            'average': self.average,
            'distribution': dict(self.histogram),
            'losses': self.losses,
            'solve_rate': self.solve_rate,
            'max_turns': self.max_turns,
            'time': self.elapsed,
        }


# ============================================================================
# GAME PLAY
# ============================================================================

def play_game(policy: GuessSelector, answer: str,
              max_turns: int = CONFIG["max_turns"],
              openers: Sequence[str] = ()) -> Tuple[int, List[str]]:
    """
    Play one game against a secret the policy cannot see.

    Args:
        policy: chooses every guess after the openers
        answer: the secret
        max_turns: turns allowed before the game counts as a loss
        openers: guesses forced on the first turns, in order

    Returns:
        (num_guesses, list_of_guesses); num_guesses is max_turns + 1 on a loss
    """
    if not policy.lexicon.is_answer(answer):
        raise ValueError(f"Answer '{answer}' not in answer list")
    _check_openers(policy, openers)

    candidates = list(policy.lexicon.answers)
    guesses = []

    for turn in range(1, max_turns + 1):
        if turn <= len(openers):
            guess = openers[turn - 1]
        else:
            guess = policy.choose(candidates)
        guesses.append(guess)
        if guess == answer:
            return turn, guesses

        candidates = narrow(candidates, guess, evaluate(guess, answer))
        if not candidates:
            raise RuntimeError("No candidates remaining - bug in filter")

    return max_turns + 1, guesses


def _check_openers(policy: GuessSelector, openers: Sequence[str]):
    for word in openers:
        if not policy.lexicon.is_valid(word):
            raise ValueError(f"Opener '{word}' is not a valid guess")


def _init_worker():
    # one numba thread per worker process
    numba.set_num_threads(1)


def _play_many(policy: GuessSelector, secrets: Sequence[str], max_turns: int,
               openers: Sequence[str] = ()) -> Counter:
    """Play every secret; runs in worker processes too."""
    counts = Counter()
    start = time.time()
    for i, secret in enumerate(secrets, 1):
        turns, _ = play_game(policy, secret, max_turns, openers)
        counts[turns] += 1
        if i % 500 == 0:
            elapsed = time.time() - start
            logger.info("[%d/%d] %.1f games/s", i, len(secrets), i / elapsed if elapsed else 0.0)
    return counts


def _draw_secrets(n: int, answers: Sequence[str], seed: Optional[int],
                  exhaustive: Optional[bool]) -> List[str]:
    if exhaustive is None:
        exhaustive = n >= 2 * len(answers)
    if exhaustive:
        return [answers[i % len(answers)] for i in range(n)]
    rng = random.Random(seed)
    return [rng.choice(answers) for _ in range(n)]


def simulate(n: int, policy: GuessSelector, *, answers: Optional[Sequence[str]] = None,
             max_turns: int = CONFIG["max_turns"], seed: Optional[int] = CONFIG["random_seed"],
             exhaustive: Optional[bool] = None, workers: int = 1,
             openers: Sequence[str] = ()) -> SimulationResult:
    """
    Play n independent games and histogram the turns each took.

    Args:
        n: number of games
        policy: the guessing policy under test
        answers: secrets to draw from (default: all lexicon answers)
        max_turns: turns allowed before a game counts as a loss
        seed: seed for random secret draws
        exhaustive: cycle through answers in order instead of drawing at
            random; by default only when n is at least twice the answer count
        workers: processes to spread games across
        openers: guesses forced on the first turns of every game

    Returns:
        SimulationResult whose histogram sums to n
    """
    if n < 0:
        raise ValueError(f"game count must not be negative, got {n}")
    pool = list(answers) if answers is not None else list(policy.lexicon.answers)
    if n and not pool:
        raise ValueError("No answers to draw secrets from")
    openers = tuple(openers)
    _check_openers(policy, openers)

    secrets = _draw_secrets(n, pool, seed, exhaustive) if n else []
    logger.info("Simulating %d games with %r (%d workers)", n, policy, workers)

    start = time.time()
    counts = Counter()
    if workers > 1 and n > 1:
        chunks = [secrets[i::workers] for i in range(workers)]
        with ProcessPoolExecutor(max_workers=workers, initializer=_init_worker) as executor:
            futs = [executor.submit(_play_many, policy, chunk, max_turns, openers)
                    for chunk in chunks if chunk]
            for fut in as_completed(futs):
                counts.update(fut.result())
    else:
        counts = _play_many(policy, secrets, max_turns, openers)
    elapsed = time.time() - start

    histogram = {turns: counts.get(turns, 0) for turns in range(1, max_turns + 2)}
    result = SimulationResult(histogram, max_turns, elapsed)
    logger.info("Simulated %d games in %.1fs: average %.4f, %d losses",
                result.games, elapsed, result.average, result.losses)
    return result


# ============================================================================
# STRATEGY TABLE BUILDING
# ============================================================================

def build_strategy_table(policy: GuessSelector, *, version: str,
                         max_depth: int = CONFIG["strategy_max_depth"],
                         min_candidates: int = CONFIG["strategy_min_candidates"],
                         budget: Optional[int] = None) -> StrategyTable:
    """
    Precompute the policy's choice for every common game state.

    Walks the game tree breadth-first from the full answer list, recording
    the best guess for each candidate set larger than min_candidates, for
    the first max_depth guesses of a game.
    """
    selector = policy.without_strategy()
    correct = 3 ** policy.lexicon.word_length - 1
    entries: Dict[str, Tuple[str, float]] = {}

    start = time.time()
    frontier = deque([(list(policy.lexicon.answers), 0)])
    while frontier:
        candidates, depth = frontier.popleft()
        if depth >= max_depth or len(candidates) <= max(min_candidates, 1):
            continue

        guess, value = selector.select(candidates, budget, top=1)[0]
        entries[state_key(candidates)] = (guess, value)
        logger.info("depth %d: %d candidates -> %s (%.4f)", depth, len(candidates), guess, value)

        for code, group in sorted(partition(candidates, guess).items()):
            if code != correct:
                frontier.append((group, depth + 1))

    logger.info("Strategy table '%s': %d states in %.1fs",
                version, len(entries), time.time() - start)
    return StrategyTable(entries, version)


# ============================================================================
# REPORTING
# ============================================================================

def print_results(result: SimulationResult):
    """Pretty print simulation results."""
    games = result.games
    print("\n" + "=" * 50)
    print("SIMULATION RESULTS")
    print("=" * 50)
    print(f"Games played: {games}")
    print(f"Average guesses: {result.average:.4f}")
    if games:
        print(f"Losses: {result.losses} ({100 * result.losses / games:.2f}%)")
    else:
        print("Losses: 0")
    if result.elapsed > 0:
        print(f"Time: {result.elapsed:.1f}s ({games / result.elapsed:.1f} games/sec)")
    print("\nDistribution:")
    for turns, count in result.histogram.items():
        pct = 100 * count / games if games else 0.0
        bar = "█" * int(pct / 2)
        label = "X" if turns == result.loss_bucket else str(turns)
        print(f"  {label}: {count:5d} ({pct:5.2f}%) {bar}")
    print("=" * 50)

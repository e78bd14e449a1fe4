"""
Game Review
===========

Replays a finished game and shows, turn by turn, how each actual guess
compared with the best-scored guesses for the candidates left at that
point, then optionally self-plays the same answer to report the policy's
average.

    === ANGLE ===

    12 candidates, scored 16 of 16:
       *  crane  2.4183
      >   apple  1.9183  (#5)
    1) apple: 🟩⬛⬛🟩🟩 -> 1
    2) angle: 🟩🟩🟩🟩🟩 -> 1

    => 2.000 avg turns (angle x10)
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

from .config import CONFIG
from .filter import narrow
from .history import GuessRecord
from .response import evaluate, response_to_string
from .scoring import TIE_DECIMALS, ranking_key, score
from .selector import GuessSelector, RankedGuess, Ranking
from .simulator import SimulationResult, simulate

logger = logging.getLogger(__name__)

LEGEND = [
    "* = best scored guess",
    "s = strategy guess",
    "> = actual guess",
]


class TurnReview(NamedTuple):
    record: GuessRecord
    before: int                       # candidates before the guess
    after: int                        # candidates after the response
    ranking: Optional[Ranking]        # None when one candidate was left
    rank: Optional[int]               # 1-based place among scored guesses
    value: Optional[float]
    strategy: Optional[RankedGuess]


def _place(guess: str, value: float, ranked: Sequence[RankedGuess], candidates: set) -> int:
    key = ranking_key(guess, value, guess in candidates)
    return 1 + sum(1 for w, v in ranked
                   if w != guess and ranking_key(w, v, w in candidates) < key)


@dataclass
class GameReview:
    answer: str
    turns: List[TurnReview]
    simulated: Optional[SimulationResult] = None
    top_n: int = CONFIG["top_n"]

    def _turn_lines(self, turn: TurnReview) -> List[str]:
        ranking = turn.ranking
        guess = turn.record.guess
        strategy_guess = turn.strategy[0] if turn.strategy else None
        shown = ranking.ranked[:self.top_n]
        best = round(ranking.ranked[0][1], TIE_DECIMALS) if ranking.ranked else None

        def line(word, value):
            marks = ''.join([
                '>' if word == guess else ' ',
                '*' if round(value, TIE_DECIMALS) == best else ' ',
                's' if word == strategy_guess else ' ',
            ])
            text = f"  {marks} {word}  {value:.4f}"
            if word == guess:
                text += f"  (#{turn.rank})"
            return text

        lines = ["", f"{turn.before} candidates, scored {ranking.scored} of {ranking.pool_size}:"]
        lines.extend(line(word, value) for word, value in shown)
        shown_words = {w for w, _ in shown}
        if strategy_guess not in (None, guess) and strategy_guess not in shown_words:
            lines.append(line(*turn.strategy))
        if guess not in shown_words:
            lines.append(line(guess, turn.value))
        return lines

    def to_text(self) -> str:
        lines = [f"=== {self.answer.upper()} ==="]
        for n, turn in enumerate(self.turns, 1):
            if turn.ranking is not None:
                lines.extend(self._turn_lines(turn))
            record = turn.record
            lines.append(f"{n}) {record.guess}: {response_to_string(record.response)} -> {turn.after}")

        if self.simulated is not None:
            lines.append("")
            lines.append(f"=> {self.simulated.average:.3f} avg turns "
                         f"({self.answer} x{self.simulated.games})")

        lines.append("")
        lines.extend(LEGEND)
        return '\n'.join(lines) + '\n'


def review_game(guesses: Sequence[str], policy: GuessSelector, *,
                budget: Optional[int] = None, simulate_games: int = 0) -> GameReview:
    """
    Review a finished game.

    Args:
        guesses: every guess played, the answer last
        policy: scores each position and, with simulate_games, replays it
        budget: guesses scored per turn (default: the policy's budget)
        simulate_games: self-play games against the same answer

    Raises:
        ValueError: no guesses, an inadmissible guess, or a final guess
            that is not an answer
    """
    guesses = [g.strip().lower() for g in guesses]
    if not guesses:
        raise ValueError("Must provide one or more guesses")
    answer = guesses[-1]
    lexicon = policy.lexicon
    if not lexicon.is_answer(answer):
        raise ValueError(f"'{answer}' isn't a Wordle answer")
    for guess in guesses:
        if not lexicon.is_valid(guess):
            raise ValueError(f"'{guess}' is not a valid guess")

    scorer = policy.without_strategy()
    candidates = list(lexicon.answers)
    turns: List[TurnReview] = []

    for guess in guesses:
        before = len(candidates)
        ranking = rank = value = strategy = None
        if before > 1:
            ranking = scorer.rank(candidates, budget)
            candidate_set = set(candidates)
            scored = dict(ranking.ranked)
            value = scored[guess] if guess in scored else score(guess, candidates, policy.scorer)
            rank = _place(guess, value, ranking.ranked, candidate_set)
            if policy.strategy is not None:
                strategy = policy.strategy.lookup(candidates)

        response = evaluate(guess, answer)
        candidates = narrow(candidates, guess, response)
        turns.append(TurnReview(GuessRecord(guess, response), before, len(candidates),
                                ranking, rank, value, strategy))
        if guess == answer:
            break

    simulated = None
    if simulate_games > 0:
        simulated = simulate(simulate_games, policy, answers=[answer], exhaustive=True)

    logger.debug("Reviewed %d turns for '%s'", len(turns), answer)
    return GameReview(answer, turns, simulated, policy.top_n)

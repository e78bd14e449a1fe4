"""
Guess Selector
==============

Ranks next guesses for a candidate set under a work budget, and renders the
human-readable assessment of a game in progress.

The budget counts guesses fully scored. Each scored guess costs
O(|candidates|), so callers facing the full answer list should pick a
smaller budget than they would for a late-game position. Running out of
budget returns the guesses scored so far, ranked; it is never an error.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .config import CONFIG
from .errors import InvalidLength, NoCandidates
from .filter import filter_candidates, narrow
from .history import GuessRecord, History
from .lexicon import Lexicon
from .response import response_to_string, words_to_chars
from .scoring import method_id, ranking_key, score_guesses
from .strategy import StrategyTable

logger = logging.getLogger(__name__)

# Guesses scored per numba call; the budget is checked between batches
BATCH_SIZE = 256

RankedGuess = Tuple[str, float]


class Ranking(NamedTuple):
    ranked: List[RankedGuess]
    scored: int
    pool_size: int
    from_strategy: bool


def _ordered_pool(valid_pool: Sequence[str], candidates: Sequence[str],
                  candidates_first: bool, is_valid: Callable[[str], bool]) -> List[str]:
    """Guess pool in scoring order, duplicates removed."""
    if candidates_first:
        words = [c for c in candidates if is_valid(c)] + list(valid_pool)
    else:
        words = list(valid_pool)
    return list(dict.fromkeys(words))


def rank_guesses(valid_pool: Sequence[str], candidates: Sequence[str], budget: int,
                 strategy: Optional[StrategyTable] = None, *, scorer: str = CONFIG["scorer"],
                 top: Optional[int] = None, candidates_first: bool = True,
                 lexicon: Optional[Lexicon] = None) -> Ranking:
    """
    select() plus how much of the pool was scored.

    When lexicon is given, valid_pool must be drawn from lexicon.valid and
    letter rows are sliced from its cached arrays instead of re-encoded.
    """
    if budget < 1:
        raise ValueError(f"budget must be a positive integer, got {budget}")
    mid = method_id(scorer)

    candidates = list(candidates)
    if not candidates:
        raise NoCandidates("No consistent words remain.")
    if len(candidates) == 1:
        return Ranking([(candidates[0], 0.0)], 0, 0, False)

    if strategy is not None:
        hit = strategy.lookup(candidates)
        if hit is not None:
            logger.debug("Strategy table hit for %d candidates: %s", len(candidates), hit[0])
            return Ranking([hit], 0, 0, True)

    width = len(candidates[0])
    if lexicon is not None:
        is_valid = lexicon.is_valid
        encode = lexicon.rows_for
    else:
        is_valid = set(valid_pool).__contains__

        def encode(words: Sequence[str]) -> np.ndarray:
            return words_to_chars(list(words), width)

    pool = _ordered_pool(valid_pool, candidates, candidates_first, is_valid)
    if not pool:
        raise ValueError("No admissible guesses to score")

    candidate_chars = encode(candidates)
    candidate_set = set(candidates)

    ranked: List[RankedGuess] = []
    limit = min(budget, len(pool))
    scored = 0
    while scored < limit:
        batch = pool[scored:scored + min(BATCH_SIZE, limit - scored)]
        batch_chars = encode(batch)
        if batch_chars.shape[1] != width:
            raise InvalidLength(f"guess pool does not match word length {width}")
        scores = score_guesses(batch_chars, candidate_chars, mid)
        ranked.extend(zip(batch, scores.tolist()))
        scored += len(batch)

    if scored < len(pool):
        logger.debug("Budget reached: scored %d of %d guesses against %d candidates",
                     scored, len(pool), len(candidates))

    ranked.sort(key=lambda item: ranking_key(item[0], item[1], item[0] in candidate_set))
    if top is not None:
        ranked = ranked[:top]
    return Ranking(ranked, scored, len(pool), False)


def select(valid_pool: Sequence[str], candidates: Sequence[str], budget: int,
           strategy: Optional[StrategyTable] = None, *, scorer: str = CONFIG["scorer"],
           top: Optional[int] = None, candidates_first: bool = True) -> List[RankedGuess]:
    """
    Rank next guesses for a candidate set.

    Args:
        valid_pool: admissible guesses
        candidates: answers still possible
        budget: maximum number of guesses to score
        strategy: optional precomputed table consulted before scoring
        scorer: "entropy", "expected" or "worst"
        top: keep only this many results (all scored guesses when None)
        candidates_first: score the candidates themselves before the rest
            of the pool, so a tight budget still considers them

    Returns:
        [(guess, score)] best first

    Raises:
        NoCandidates: candidates is empty
    """
    return rank_guesses(valid_pool, candidates, budget, strategy, scorer=scorer,
                        top=top, candidates_first=candidates_first).ranked


# ============================================================================
# ASSESSMENT REPORT
# ============================================================================

@dataclass
class Assessment:
    """Everything the text report shows about a game in progress."""
    history: History
    counts: List[int]
    candidates: List[str]
    ranking: Optional[Ranking] = None
    list_max: int = CONFIG["list_candidates_max"]

    @property
    def solved(self) -> Optional[str]:
        return self.candidates[0] if len(self.candidates) == 1 else None

    def to_text(self) -> str:
        n = len(self.candidates)
        lines = [f"=== {len(self.history)} guesses, {n} candidates ==="]

        for turn, (record, count) in enumerate(zip(self.history, self.counts), 1):
            lines.append(f"{turn}) {record.guess}: {response_to_string(record.response)} -> {count}")

        if n == 0:
            lines.append("=> No consistent words remain.")
            return '\n'.join(lines) + '\n'

        if n == 1:
            lines.append(f"=> Solved: {self.solved}")
            return '\n'.join(lines) + '\n'

        if n <= self.list_max:
            lines.append(f"Candidates: {', '.join(self.candidates)}")

        ranking = self.ranking
        if ranking.from_strategy:
            lines.append("Ranked guesses (strategy table):")
        else:
            lines.append(f"Ranked guesses (scored {ranking.scored} of {ranking.pool_size}):")

        candidate_set = set(self.candidates)
        for word, value in ranking.ranked:
            mark = '*' if word in candidate_set else ' '
            lines.append(f"  {mark} {word}  {value:.4f}")

        return '\n'.join(lines) + '\n'


# ============================================================================
# SELECTOR CLASS
# ============================================================================

class GuessSelector:
    """
    A guessing policy: a lexicon plus how to pick from it.

    Holds no per-game state, so one instance can serve concurrent requests
    and be shipped to simulator worker processes.
    """

    def __init__(self, lexicon: Lexicon, budget: int = CONFIG["budget"],
                 scorer: str = CONFIG["scorer"], strategy: Optional[StrategyTable] = None,
                 top_n: int = CONFIG["top_n"], candidates_first: bool = True):
        """
        Args:
            lexicon: answers and valid guesses
            budget: default number of guesses scored per selection
            scorer: "entropy", "expected" or "worst"
            strategy: optional precomputed table
            top_n: ranked guesses kept in assessments
            candidates_first: score candidates before the rest of the pool
        """
        if budget < 1:
            raise ValueError(f"budget must be a positive integer, got {budget}")
        method_id(scorer)

        self.lexicon = lexicon
        self.budget = budget
        self.scorer = scorer
        self.strategy = strategy
        self.top_n = top_n
        self.candidates_first = candidates_first

    def candidates(self, history: Sequence[GuessRecord]) -> List[str]:
        """Answers consistent with the history."""
        return filter_candidates(self.lexicon.answers, history, self.lexicon.answer_chars)

    def rank(self, candidates: Sequence[str], budget: Optional[int] = None,
             top: Optional[int] = None) -> Ranking:
        return rank_guesses(self.lexicon.valid, candidates,
                            self.budget if budget is None else budget,
                            self.strategy, scorer=self.scorer, top=top,
                            candidates_first=self.candidates_first, lexicon=self.lexicon)

    def select(self, candidates: Sequence[str], budget: Optional[int] = None,
               top: Optional[int] = None) -> List[RankedGuess]:
        return self.rank(candidates, budget, top).ranked

    def choose(self, candidates: Sequence[str]) -> str:
        """Best next guess for the candidate set."""
        return self.select(candidates, top=1)[0][0]

    def assessment(self, history: Sequence[GuessRecord],
                   budget: Optional[int] = None) -> Assessment:
        history = list(history)
        counts = []
        candidates = list(self.lexicon.answers)
        for record in history:
            candidates = narrow(candidates, record.guess, record.response)
            counts.append(len(candidates))

        result = Assessment(history, counts, candidates)
        if len(candidates) > 1:
            result.ranking = self.rank(candidates, budget, top=self.top_n)
        return result

    def assess(self, history: Sequence[GuessRecord], budget: Optional[int] = None) -> str:
        """
        Text report for a game in progress: candidates left after each
        guess, the remaining candidates when few, and the top ranked next
        guesses. Contradictory histories report that no words remain.
        """
        return self.assessment(history, budget).to_text()

    def without_strategy(self) -> "GuessSelector":
        return GuessSelector(self.lexicon, self.budget, self.scorer, None,
                             self.top_n, self.candidates_first)

    def __repr__(self) -> str:
        return (f"GuessSelector(scorer={self.scorer!r}, budget={self.budget}, "
                f"strategy={self.strategy!r})")


def assess(history: Sequence[GuessRecord], budget: int, lexicon: Lexicon, *,
           scorer: str = CONFIG["scorer"], strategy: Optional[StrategyTable] = None,
           top_n: int = CONFIG["top_n"]) -> str:
    """Filter, score and rank in one call, returning the text report."""
    selector = GuessSelector(lexicon, budget, scorer, strategy, top_n)
    return selector.assess(history)

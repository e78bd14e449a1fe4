"""
Candidate Filter
================

Narrows a word list to the words consistent with every (guess, response)
record seen so far.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import numpy as np

from .errors import InvalidLength
from .history import GuessRecord
from .response import (
    compute_feedback_row,
    encode_response,
    word_to_chars,
    words_to_chars,
)


def _consistent_mask(universe_chars: np.ndarray, history: Sequence[GuessRecord]) -> np.ndarray:
    mask = np.ones(universe_chars.shape[0], dtype=np.bool_)
    width = universe_chars.shape[1]
    for guess, response in history:
        if len(guess) != width or len(response) != width:
            raise InvalidLength(f"'{guess}' does not match word length {width}")
        row = compute_feedback_row(word_to_chars(guess), universe_chars)
        mask &= row == encode_response(response)
    return mask


def filter_candidates(universe: Sequence[str], history: Sequence[GuessRecord],
                      universe_chars: Optional[np.ndarray] = None) -> List[str]:
    """
    Keep the words w in universe for which evaluate(g, w) == r for every
    record (g, r) in history. Relative order is preserved; an empty result
    means the history is contradictory.

    universe_chars, when given, must be the letter-index rows of universe
    (e.g. Lexicon.answer_chars) and saves re-encoding the words.
    """
    universe = list(universe)
    if not history or not universe:
        return universe

    if universe_chars is None:
        chars = words_to_chars(universe, len(universe[0]))
    else:
        chars = universe_chars
    mask = _consistent_mask(chars, history)
    return [w for w, keep in zip(universe, mask) if keep]


def narrow(candidates: Sequence[str], guess: str, response) -> List[str]:
    """Apply a single record to an already-filtered candidate list."""
    return filter_candidates(candidates, [GuessRecord(guess, tuple(response))])


def partition(candidates: Sequence[str], guess: str) -> Dict[int, List[str]]:
    """Group candidates by the pattern code guess would produce against them."""
    groups: Dict[int, List[str]] = defaultdict(list)
    if not candidates:
        return {}
    width = len(candidates[0])
    if len(guess) != width:
        raise InvalidLength(f"'{guess}' does not match word length {width}")
    chars = words_to_chars(list(candidates), width)
    row = compute_feedback_row(word_to_chars(guess), chars)
    for word, code in zip(candidates, row):
        groups[int(code)].append(word)
    return dict(groups)

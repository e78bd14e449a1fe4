"""
Scorer
======

Scores a guess by how well it splits a candidate set across responses.
Higher is always better.

Methods:
- entropy:  Shannon entropy of the partition (bits of information)
- expected: negated expected number of candidates left (sum of size^2 / n)
- worst:    negated size of the largest partition left unsolved
"""

from typing import Sequence, Tuple

import numpy as np
from numba import jit, prange

from .errors import InvalidLength
from .response import compute_feedback, word_to_chars, words_to_chars


# ============================================================================
# CONSTANTS
# ============================================================================

METHOD_ENTROPY = 0
METHOD_EXPECTED = 1
METHOD_WORST = 2

METHODS = {
    "entropy": METHOD_ENTROPY,
    "expected": METHOD_EXPECTED,
    "worst": METHOD_WORST,
}

# Scores equal to this many decimals are treated as ties
TIE_DECIMALS = 9


# ============================================================================
# NUMBA FUNCTIONS
# ============================================================================

@jit(nopython=True, cache=True)
def get_partition_sizes(guess: np.ndarray, candidate_chars: np.ndarray) -> np.ndarray:
    """Count how many candidates fall into each feedback partition."""
    sizes = np.zeros(3 ** guess.shape[0], dtype=np.int32)
    for c in range(candidate_chars.shape[0]):
        sizes[compute_feedback(guess, candidate_chars[c])] += 1
    return sizes


@jit(nopython=True, cache=True)
def compute_entropy(sizes: np.ndarray, total: int) -> float:
    """Compute Shannon entropy of partition distribution."""
    if total == 0:
        return 0.0

    entropy = 0.0
    for s in sizes:
        if s > 0:
            p = s / total
            entropy -= p * np.log2(p)

    return entropy


@jit(nopython=True, cache=True)
def expected_remaining(sizes: np.ndarray, total: int) -> float:
    """Expected candidates left after the guess (all-green partition excluded)."""
    if total == 0:
        return 0.0

    correct = sizes.shape[0] - 1
    expected = 0.0
    for i in range(sizes.shape[0]):
        s = sizes[i]
        if s > 0 and i != correct:
            expected += s * s

    return expected / total


@jit(nopython=True, cache=True)
def worst_case(sizes: np.ndarray) -> int:
    """Largest partition other than the all-green one."""
    correct = sizes.shape[0] - 1
    worst = 0
    for i in range(sizes.shape[0]):
        if i != correct and sizes[i] > worst:
            worst = sizes[i]
    return worst


@jit(nopython=True, parallel=True, cache=True)
def score_guesses(guess_chars: np.ndarray, candidate_chars: np.ndarray, method: int) -> np.ndarray:
    """
    Score every guess row against the candidate set in parallel.

    Args:
        guess_chars: shape (n_guesses, L) letter indices
        candidate_chars: shape (n_candidates, L) letter indices
        method: one of the METHOD_* constants

    Returns:
        shape (n_guesses,) float64 scores, higher is better
    """
    n_guesses = guess_chars.shape[0]
    total = candidate_chars.shape[0]
    scores = np.zeros(n_guesses, dtype=np.float64)

    for g in prange(n_guesses):
        sizes = get_partition_sizes(guess_chars[g], candidate_chars)
        if method == METHOD_ENTROPY:
            scores[g] = compute_entropy(sizes, total)
        elif method == METHOD_EXPECTED:
            scores[g] = -expected_remaining(sizes, total)
        else:
            scores[g] = -worst_case(sizes)

    return scores


# ============================================================================
# PUBLIC API
# ============================================================================

def method_id(method: str) -> int:
    try:
        return METHODS[method]
    except KeyError:
        raise ValueError(
            f"Unknown scorer '{method}', expected one of {sorted(METHODS)}"
        ) from None


def score(guess: str, candidates: Sequence[str], method: str = "entropy") -> float:
    """
    Score one guess against a candidate set.

    Args:
        guess: the guess word
        candidates: the current candidate set
        method: "entropy" (default), "expected" or "worst"

    Returns:
        Score, higher is better. An empty candidate set scores 0.0.
    """
    mid = method_id(method)
    if not candidates:
        return 0.0
    if any(len(c) != len(guess) for c in candidates):
        raise InvalidLength(f"'{guess}' does not match the candidate word length")

    guess_chars = word_to_chars(guess).reshape(1, -1)
    candidate_chars = words_to_chars(list(candidates), len(guess))
    return float(score_guesses(guess_chars, candidate_chars, mid)[0])


def ranking_key(word: str, value: float, is_candidate: bool) -> Tuple[float, bool, str]:
    """
    Sort key for ranked guesses: best score first, then guesses that could
    be the answer, then alphabetical.
    """
    return (-round(value, TIE_DECIMALS), not is_candidate, word)

"""
Response Evaluator
==================

Computes the three-colour feedback for a guess against an answer.

A Response is a tuple of ResponseCode, one per letter. Internally responses
travel as a base-3 pattern code: position i contributes tile * 3**i, so the
all-green response for a five-letter word is 242.
"""

from enum import IntEnum
from typing import List, Sequence, Tuple

import numpy as np
from numba import jit

from .config import CONFIG
from .errors import InvalidLength


# ============================================================================
# CONSTANTS
# ============================================================================

WORD_LENGTH = CONFIG["word_length"]
N_PATTERNS = 3 ** WORD_LENGTH        # 243
CORRECT_PATTERN = N_PATTERNS - 1     # 242, all green


class ResponseCode(IntEnum):
    BLACK = 0
    YELLOW = 1
    GREEN = 2


Response = Tuple[ResponseCode, ...]

_TILE_CHARS = {
    'g': ResponseCode.GREEN, '🟩': ResponseCode.GREEN,
    'y': ResponseCode.YELLOW, '🟨': ResponseCode.YELLOW,
    'b': ResponseCode.BLACK, '⬛': ResponseCode.BLACK,
}
_EMOJI = ['⬛', '🟨', '🟩']


# ============================================================================
# NUMBA-ACCELERATED FEEDBACK COMPUTATION
# ============================================================================

@jit(nopython=True, cache=True)
def compute_feedback(guess: np.ndarray, answer: np.ndarray) -> int:
    """
    Compute the pattern code for a guess against an answer.

    Args:
        guess: shape (L,) array of letter indices (0-25 for a-z)
        answer: shape (L,) array of letter indices

    Returns:
        Integer pattern code (0 to 3**L - 1)
    """
    n = guess.shape[0]
    unmatched = np.zeros(26, dtype=np.int32)

    # Count answer letters not already matched in place
    for i in range(n):
        if guess[i] != answer[i]:
            unmatched[answer[i]] += 1

    code = 0
    multiplier = 1
    for i in range(n):
        if guess[i] == answer[i]:
            tile = 2
        elif unmatched[guess[i]] > 0:
            tile = 1
            unmatched[guess[i]] -= 1
        else:
            tile = 0
        code += tile * multiplier
        multiplier *= 3

    return code


@jit(nopython=True, cache=True)
def compute_feedback_row(guess: np.ndarray, answer_chars: np.ndarray) -> np.ndarray:
    """Pattern codes for one guess against every row of answer_chars."""
    n_answers = answer_chars.shape[0]
    result = np.zeros(n_answers, dtype=np.int32)
    for j in range(n_answers):
        result[j] = compute_feedback(guess, answer_chars[j])
    return result


# ============================================================================
# WORD <-> ARRAY CONVERSION
# ============================================================================

def word_to_chars(word: str) -> np.ndarray:
    """Convert one word to an int32 array of letter indices."""
    word = word.lower()
    if not (word.isascii() and word.isalpha()):
        raise ValueError(f"'{word}' was not a valid Wordle word.")
    return np.frombuffer(word.encode('ascii'), dtype=np.uint8).astype(np.int32) - ord('a')


def words_to_chars(words: Sequence[str], length: int = WORD_LENGTH) -> np.ndarray:
    """
    Convert equal-length words to a (n, length) int32 array.

    Raises:
        InvalidLength: a word is not length letters long
        ValueError: a word has characters outside a-z
    """
    if not words:
        return np.zeros((0, length), dtype=np.int32)
    for word in words:
        if len(word) != length:
            raise InvalidLength(f"'{word}' does not match word length {length}")
    joined = ''.join(words).lower()
    if not (joined.isascii() and joined.isalpha()):
        bad = next(w for w in words if not (w.isascii() and w.isalpha()))
        raise ValueError(f"'{bad}' was not a valid Wordle word.")
    arr = np.frombuffer(joined.encode('ascii'), dtype=np.uint8).reshape(len(words), length)
    return arr.astype(np.int32) - ord('a')


# ============================================================================
# EVALUATION
# ============================================================================

def evaluate_code(guess: str, answer: str) -> int:
    """Pattern code for guess against answer."""
    if len(guess) != len(answer):
        raise InvalidLength(
            f"guess length ({len(guess)}) != answer length ({len(answer)})"
        )
    return int(compute_feedback(word_to_chars(guess), word_to_chars(answer)))


def evaluate(guess: str, answer: str) -> Response:
    """
    Compute the Response for guess against answer.

    Duplicate letters in the guess earn Yellow only up to the number of
    unmatched copies of that letter in the answer, left to right:

        >>> response_to_string(evaluate("papal", "apple"))
        '🟨🟨🟩⬛🟨'
    """
    return decode_response(evaluate_code(guess, answer), len(guess))


# ============================================================================
# RESPONSE CODECS
# ============================================================================

def encode_response(response: Sequence[int]) -> int:
    """Convert a Response (or any tile sequence) to its pattern code."""
    code = 0
    multiplier = 1
    for tile in response:
        code += int(tile) * multiplier
        multiplier *= 3
    return code


def decode_response(code: int, length: int = WORD_LENGTH) -> Response:
    """Convert a pattern code back to a Response."""
    tiles: List[ResponseCode] = []
    for _ in range(length):
        tiles.append(ResponseCode(code % 3))
        code //= 3
    return tuple(tiles)


def parse_response(text: str, length: int = WORD_LENGTH) -> Response:
    """
    Parse typed response characters ('gybbg', 'GYBBG' or '🟩🟨⬛⬛🟩').

    Raises:
        ValueError: on unknown characters or the wrong number of tiles
    """
    tiles = []
    for c in text.strip():
        tile = _TILE_CHARS.get(c.lower())
        if tile is None:
            raise ValueError(f"'{text}' was not a valid response.")
        tiles.append(tile)
    if len(tiles) != length:
        raise ValueError(f"'{text}' has {len(tiles)} tiles, expected {length}.")
    return tuple(tiles)


def response_to_string(response: Sequence[int]) -> str:
    """Emoji form of a Response ("🟩🟨⬛🟨🟨")."""
    return ''.join(_EMOJI[int(tile)] for tile in response)


def response_to_letters(response: Sequence[int]) -> str:
    """Letter form of a Response ("gybyy")."""
    return ''.join('byg'[int(tile)] for tile in response)

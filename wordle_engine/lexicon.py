"""
Lexicon
=======

Immutable word lists: ``answers`` (possible secrets) and ``valid``
(admissible guesses, always a superset of answers).
"""

import logging
import re
from typing import Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np

from .config import CONFIG
from .errors import MalformedLexicon
from .response import words_to_chars

logger = logging.getLogger(__name__)

WORD_LENGTH = CONFIG["word_length"]


def parse_words(content: Union[str, bytes], word_length: int = WORD_LENGTH,
                source: str = "<text>") -> List[str]:
    """
    Parse a newline-delimited word list.

    Blank lines are skipped, words are lower-cased and duplicates keep their
    first position.

    Raises:
        MalformedLexicon: if any entry is not exactly word_length letters
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedLexicon(f"{source}: not UTF-8 text ({e})") from e

    pattern = re.compile(rf"^[a-z]{{{word_length}}}$")
    seen = set()
    words = []
    for line_number, line in enumerate(content.splitlines(), 1):
        word = line.strip().lower()
        if not word:
            continue
        if not pattern.match(word):
            raise MalformedLexicon(
                f"{source}, line {line_number}: '{line.strip()}' is not a "
                f"{word_length}-letter word"
            )
        if word not in seen:
            seen.add(word)
            words.append(word)
    return words


def load_words(filepath: str, word_length: int = WORD_LENGTH) -> List[str]:
    """Load a word list file, one word per line."""
    with open(filepath, 'rb') as f:
        return parse_words(f.read(), word_length, source=filepath)


class Lexicon:
    """
    The answer and valid-guess lists, plus their letter-index arrays.

    Instances never change after construction and can be shared freely
    between threads and pickled to worker processes.
    """

    def __init__(self, answers: Iterable[str], valid: Iterable[str] = (),
                 word_length: int = WORD_LENGTH):
        """
        Args:
            answers: possible answer words, in order
            valid: admissible guesses; answers missing here are appended
            word_length: letters per word
        """
        answers = [w.lower() for w in answers]
        valid = [w.lower() for w in valid]

        pattern = re.compile(rf"^[a-z]{{{word_length}}}$")
        for word in answers + valid:
            if not pattern.match(word):
                raise MalformedLexicon(f"'{word}' is not a {word_length}-letter word")
        if not answers:
            raise MalformedLexicon("answer list is empty")

        answers = list(dict.fromkeys(answers))
        valid = list(dict.fromkeys(valid))
        valid_set = set(valid)
        valid.extend(a for a in answers if a not in valid_set)

        self._word_length = word_length
        self._answers: Tuple[str, ...] = tuple(answers)
        self._valid: Tuple[str, ...] = tuple(valid)
        self._answer_set = frozenset(answers)
        self._valid_to_idx: Dict[str, int] = {w: i for i, w in enumerate(valid)}

        self._answer_chars = words_to_chars(self._answers, word_length)
        self._valid_chars = words_to_chars(self._valid, word_length)
        self._answer_chars.setflags(write=False)
        self._valid_chars.setflags(write=False)

        logger.debug("Lexicon loaded: %d answers, %d valid guesses",
                     len(self._answers), len(self._valid))

    @classmethod
    def from_text(cls, answers: Union[str, bytes], valid: Union[str, bytes] = "",
                  word_length: int = WORD_LENGTH) -> "Lexicon":
        """Build a Lexicon from raw newline-delimited word lists."""
        return cls(parse_words(answers, word_length, source="answers"),
                   parse_words(valid, word_length, source="valid"),
                   word_length)

    @classmethod
    def from_files(cls, answers_path: str, valid_path: str = None,
                   word_length: int = WORD_LENGTH) -> "Lexicon":
        answers = load_words(answers_path, word_length)
        valid = load_words(valid_path, word_length) if valid_path else []
        return cls(answers, valid, word_length)

    @property
    def answers(self) -> Tuple[str, ...]:
        return self._answers

    @property
    def valid(self) -> Tuple[str, ...]:
        return self._valid

    @property
    def answer_chars(self) -> np.ndarray:
        return self._answer_chars

    @property
    def valid_chars(self) -> np.ndarray:
        return self._valid_chars

    @property
    def word_length(self) -> int:
        return self._word_length

    def is_answer(self, word: str) -> bool:
        return word in self._answer_set

    def is_valid(self, word: str) -> bool:
        return word in self._valid_to_idx

    def rows_for(self, words: Sequence[str]) -> np.ndarray:
        """
        Letter-index rows for words, sliced from valid_chars. Words outside
        the valid list are encoded directly.
        """
        try:
            idx = [self._valid_to_idx[w] for w in words]
        except KeyError:
            return words_to_chars(list(words), self._word_length)
        return self._valid_chars[np.asarray(idx, dtype=np.intp)]

    def __repr__(self) -> str:
        return f"Lexicon(answers={len(self._answers)}, valid={len(self._valid)})"

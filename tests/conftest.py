import pytest

from wordle_engine.lexicon import Lexicon
from wordle_engine.selector import GuessSelector

ANSWERS = [
    "apple", "angle", "apply", "ample", "maple", "crane",
    "crack", "crash", "crost", "crunk", "dowry", "sheck",
]
VALID = ["salet", "soare", "spilt", "dumbo"]


@pytest.fixture
def lexicon() -> Lexicon:
    return Lexicon(ANSWERS, VALID)


@pytest.fixture
def selector(lexicon: Lexicon) -> GuessSelector:
    return GuessSelector(lexicon, budget=100)


@pytest.fixture
def tiny_lexicon() -> Lexicon:
    words = ["apple", "angle", "apply"]
    return Lexicon(words, words)

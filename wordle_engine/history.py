"""Guess records and parsing of the comma-separated history format."""

import re
from typing import List, NamedTuple, Sequence

from .config import CONFIG
from .response import Response, evaluate, parse_response, response_to_letters

WORD_LENGTH = CONFIG["word_length"]


class GuessRecord(NamedTuple):
    guess: str
    response: Response


History = List[GuessRecord]


def _as_word(token: str, word_length: int):
    token = token.lower()
    if re.match(rf"^[a-z]{{{word_length}}}$", token):
        return token
    return None


def _as_response(token: str, word_length: int):
    try:
        return parse_response(token, word_length)
    except ValueError:
        return None


def parse_history(text: str, word_length: int = WORD_LENGTH) -> History:
    """
    Parse a history string into GuessRecords.

    Entries are separated by commas. Each guess is followed by its response,
    either in the same entry ("soare:bbbyb" or "soare bbbyb") or as the next
    entry ("soare, bbbyb"). A five-letter token made only of g/y/b is read as
    a response when a guess is waiting for one.

    Raises:
        ValueError: for invalid tokens or a guess with no response
    """
    tokens = [t for t in re.split(r"[,\s:=]+", text.strip()) if t]

    history: History = []
    pending = None
    for token in tokens:
        if pending is not None:
            response = _as_response(token, word_length)
            if response is None:
                raise ValueError(f"'{pending}' must be followed by a response, got '{token}'.")
            history.append(GuessRecord(pending, response))
            pending = None
            continue

        word = _as_word(token, word_length)
        if word is None:
            raise ValueError(f"'{token}' was not a valid guess.")
        pending = word

    if pending is not None:
        raise ValueError(f"'{pending}' has no response.")
    return history


def format_history(history: Sequence[GuessRecord]) -> str:
    """Inverse of parse_history ("soare:bbbyb,clint:bbybg")."""
    return ','.join(f"{r.guess}:{response_to_letters(r.response)}" for r in history)


def history_for_answer(guesses: Sequence[str], answer: str) -> History:
    """The History that playing guesses against a known answer produces."""
    return [GuessRecord(g.lower(), evaluate(g.lower(), answer.lower())) for g in guesses]

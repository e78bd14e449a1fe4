"""Error kinds raised by the engine."""


class WordleEngineError(Exception):
    """Base class for all engine errors."""


class InvalidLength(WordleEngineError, ValueError):
    """Guess and answer do not have the same length."""


class MalformedLexicon(WordleEngineError, ValueError):
    """A word list entry is not a valid fixed-length word."""


class MalformedStrategy(WordleEngineError, ValueError):
    """A strategy table blob could not be parsed or has the wrong version."""


class NoCandidates(WordleEngineError, ValueError):
    """No answer is consistent with the guess history."""

import pytest

from wordle_engine.errors import (
    InvalidLength,
    MalformedLexicon,
    MalformedStrategy,
    NoCandidates,
    WordleEngineError,
)


@pytest.mark.parametrize("error", [InvalidLength, MalformedLexicon, MalformedStrategy, NoCandidates])
def test_engine_errors_share_a_base(error):
    assert issubclass(error, WordleEngineError)
    assert issubclass(error, ValueError)

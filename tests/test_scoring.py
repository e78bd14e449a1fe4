"""Tests for guess scoring."""

import math

import pytest

from wordle_engine.errors import InvalidLength
from wordle_engine.scoring import ranking_key, score

SPLIT = ["wwwww", "xxxxx", "yyyyy", "zzzzz"]


class TestEntropy:
    def test_even_split(self):
        # each candidate lights up a different position
        assert score("wxyzq", SPLIT) == pytest.approx(2.0)

    def test_no_information(self):
        assert score("qqqqq", SPLIT) == pytest.approx(0.0)

    def test_single_candidate(self):
        assert score("crane", ["crane"]) == pytest.approx(0.0)

    def test_candidate_guess(self):
        expected = -(0.25 * math.log2(0.25) + 0.75 * math.log2(0.75))
        assert score("wwwww", SPLIT) == pytest.approx(expected)

    def test_deterministic(self):
        words = ["apple", "angle", "apply", "ample", "maple"]
        assert score("plane", words) == score("plane", words)

    def test_bounded_by_log_of_count(self):
        words = ["apple", "angle", "apply", "ample", "maple"]
        assert 0.0 <= score("plane", words) <= math.log2(len(words))


class TestHeuristics:
    def test_expected_remaining(self):
        assert score("qqqqq", SPLIT, "expected") == pytest.approx(-4.0)
        assert score("wxyzq", SPLIT, "expected") == pytest.approx(-1.0)
        # the all-green partition is already solved
        assert score("wwwww", SPLIT, "expected") == pytest.approx(-9 / 4)

    def test_worst_case(self):
        assert score("qqqqq", SPLIT, "worst") == -4.0
        assert score("wxyzq", SPLIT, "worst") == -1.0
        assert score("wwwww", SPLIT, "worst") == -3.0


class TestErrors:
    def test_empty_candidates(self):
        assert score("crane", []) == 0.0

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown scorer"):
            score("crane", ["crane"], "magic")

    def test_length_mismatch(self):
        with pytest.raises(InvalidLength):
            score("crane", ["cranes"])

    def test_non_letter_candidate(self):
        with pytest.raises(ValueError, match="cr4ne"):
            score("crane", ["cr4ne", "slate"])

    def test_mixed_case_candidates(self):
        assert score("crane", ["Crane", "SLATE"]) == score("crane", ["crane", "slate"])


def test_ranking_key_orders_ties():
    items = [("zzzzz", 1.0, False), ("bbbbb", 1.0, True), ("aaaaa", 1.0, False), ("ccccc", 2.0, False)]
    ranked = sorted(items, key=lambda item: ranking_key(*item))
    assert [w for w, _, _ in ranked] == ["ccccc", "bbbbb", "aaaaa", "zzzzz"]


def test_ranking_key_ignores_float_noise():
    assert ranking_key("a", 1.0, True)[0] == ranking_key("a", 1.0 + 1e-12, True)[0]

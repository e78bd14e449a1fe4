"""Tests for the response evaluator and codecs."""

import itertools

import numpy as np
import pytest

from wordle_engine.errors import InvalidLength
from wordle_engine.response import (
    CORRECT_PATTERN,
    ResponseCode,
    compute_feedback_row,
    decode_response,
    encode_response,
    evaluate,
    evaluate_code,
    parse_response,
    response_to_letters,
    response_to_string,
    words_to_chars,
)

G, Y, B = ResponseCode.GREEN, ResponseCode.YELLOW, ResponseCode.BLACK

WORDS = ["apple", "papal", "esses", "sills", "crane", "llama", "allay", "eerie", "geese", "sheep"]


def score(guess: str, answer: str) -> str:
    return response_to_string(evaluate(guess, answer))


class TestEvaluate:
    def test_papal_against_apple(self):
        assert evaluate("papal", "apple") == (Y, Y, G, B, Y)

    def test_basics(self):
        assert score("decks", "diety") == "🟩🟨⬛⬛⬛"
        assert score("crane", "pools") == "⬛⬛⬛⬛⬛"
        assert score("crane", "crane") == "🟩🟩🟩🟩🟩"
        assert score("crane", "crown") == "🟩🟩⬛🟨⬛"
        assert score("cares", "scare") == "🟨🟨🟨🟨🟨"

    def test_repeat_letters(self):
        assert score("sills", "esses") == "🟨⬛⬛⬛🟩"
        assert score("sssss", "esses") == "⬛🟩🟩⬛🟩"
        assert score("sssso", "esses") == "🟨🟩🟩⬛⬛"
        assert score("sosso", "esses") == "🟨⬛🟩🟨⬛"
        assert score("silly", "esses") == "🟨⬛⬛⬛⬛"

    @pytest.mark.parametrize("word", WORDS)
    def test_self_match_is_all_green(self, word):
        assert evaluate(word, word) == (G, G, G, G, G)

    def test_case_insensitive(self):
        assert evaluate("PAPAL", "Apple") == evaluate("papal", "apple")

    def test_length_mismatch(self):
        with pytest.raises(InvalidLength):
            evaluate("crane", "cranes")

    def test_invalid_length_is_value_error(self):
        with pytest.raises(ValueError):
            evaluate("abc", "abcd")

    def test_non_letters_rejected(self):
        with pytest.raises(ValueError):
            evaluate("cr4ne", "crane")

    def test_tile_counts_never_exceed_answer_letters(self):
        for guess, answer in itertools.product(WORDS, repeat=2):
            response = evaluate(guess, answer)
            greens = sum(1 for t in response if t == G)
            assert greens == sum(1 for g, a in zip(guess, answer) if g == a)

            for letter in set(guess):
                green_for_letter = sum(
                    1 for g, a in zip(guess, answer) if g == a == letter
                )
                yellow_for_letter = sum(
                    1 for g, t in zip(guess, response) if g == letter and t == Y
                )
                assert yellow_for_letter <= answer.count(letter) - green_for_letter

    def test_row_agrees_with_evaluate(self):
        chars = words_to_chars(WORDS)
        for i, guess in enumerate(WORDS):
            row = compute_feedback_row(chars[i], chars)
            assert row.tolist() == [evaluate_code(guess, answer) for answer in WORDS]


class TestCodecs:
    def test_pattern_code(self):
        # Y + 3*Y + 9*G + 27*B + 81*Y
        assert evaluate_code("papal", "apple") == 103
        assert evaluate_code("crane", "crane") == CORRECT_PATTERN == 242

    def test_encode_decode(self):
        response = (G, Y, B, Y, Y)
        assert decode_response(encode_response(response)) == response
        assert encode_response([2, 2, 2, 2, 2]) == CORRECT_PATTERN

    def test_parse_response(self):
        assert parse_response("gybyy") == (G, Y, B, Y, Y)
        assert parse_response("GgYyb") == (G, G, Y, Y, B)
        assert parse_response("🟩🟨⬛🟨🟨") == (G, Y, B, Y, Y)

    @pytest.mark.parametrize("text", ["bbbb", "ggbbyy", "bbbbz", ""])
    def test_parse_response_rejects(self, text):
        with pytest.raises(ValueError):
            parse_response(text)

    def test_string_forms(self):
        response = parse_response("gybyy")
        assert response_to_string(response) == "🟩🟨⬛🟨🟨"
        assert response_to_letters(response) == "gybyy"

    def test_words_to_chars(self):
        chars = words_to_chars(["crane", "abcde"])
        assert chars.dtype == np.int32
        assert chars.tolist() == [[2, 17, 0, 13, 4], [0, 1, 2, 3, 4]]
        assert words_to_chars([]).shape == (0, 5)

    def test_words_to_chars_lowercases(self):
        assert words_to_chars(["CRANE"]).tolist() == words_to_chars(["crane"]).tolist()

    @pytest.mark.parametrize("words", [["crane", "cr4ne"], ["crane", "crées"], ["crane", "cr ne"]])
    def test_words_to_chars_rejects_non_letters(self, words):
        with pytest.raises(ValueError, match="not a valid Wordle word"):
            words_to_chars(words)

    def test_words_to_chars_rejects_other_lengths(self):
        # lengths that still add up to a whole number of rows
        with pytest.raises(InvalidLength):
            words_to_chars(["abcd", "abcdef"])

"""Tests for the lexicon sentiment heuristic."""

import pytest

from src.sentiment.lexicon import (
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    classify_lexicon,
    count_lexicon_hits,
    tokenize,
)
from src.sentiment.schemas import SentimentResult


class TestLexiconStore:
    """Tests for the positive/negative word sets."""

    def test_sets_have_twenty_words_each(self):
        assert len(POSITIVE_WORDS) == 20
        assert len(NEGATIVE_WORDS) == 20

    def test_sets_are_disjoint(self):
        assert not POSITIVE_WORDS & NEGATIVE_WORDS

    def test_words_are_lower_case(self):
        for word in POSITIVE_WORDS | NEGATIVE_WORDS:
            assert word == word.lower()


class TestTokenize:
    def test_splits_on_any_whitespace(self):
        assert tokenize("Good\tday\n  SIR") == ["good", "day", "sir"]

    def test_punctuation_stays_attached(self):
        assert tokenize("great! awful,") == ["great!", "awful,"]

    def test_repeated_words_counted_per_occurrence(self):
        assert count_lexicon_hits(["good", "good", "bad"]) == (2, 1)


class TestClassifyLexicon:
    """Tests for classify_lexicon."""

    @pytest.mark.parametrize("text", ["", " ", "\n\t  "])
    def test_blank_text_is_neutral_zero(self, text):
        assert classify_lexicon(text) == SentimentResult("neutral", 0.0, 0.0)

    def test_mixed_positive_sentence(self):
        """3 positive hits over 8 tokens."""
        result = classify_lexicon("I love this, it is great and wonderful")

        assert result.sentiment == "positive"
        assert result.score == pytest.approx(0.375)
        assert result.confidence == pytest.approx(0.375)

    def test_all_negative(self):
        result = classify_lexicon("terrible awful horrible")

        assert result.sentiment == "negative"
        assert result.score == -1.0
        assert result.confidence == 1.0

    def test_no_hits_is_confident_neutral(self):
        result = classify_lexicon("the cat sat on the mat")

        assert result.sentiment == "neutral"
        assert result.score == 0.0
        assert result.confidence == 1.0

    def test_weak_signal_inside_neutral_band(self):
        """One hit in eleven tokens is below the 0.1 band."""
        text = "good " + "word " * 10
        result = classify_lexicon(text)

        assert result.sentiment == "neutral"
        assert result.score == pytest.approx(1 / 11)
        assert result.confidence == pytest.approx(1 - 1 / 11)

    def test_score_exactly_on_band_is_polar(self):
        """1/10 is not strictly below the band."""
        result = classify_lexicon("bad " + "word " * 9)

        assert result.sentiment == "negative"
        assert result.confidence == pytest.approx(0.1)

    def test_case_insensitive(self):
        assert classify_lexicon("AWESOME").sentiment == "positive"

    def test_hits_cancel_out(self):
        result = classify_lexicon("good bad")

        assert result.sentiment == "neutral"
        assert result.score == 0.0

    def test_custom_neutral_band(self):
        result = classify_lexicon("good word word word", neutral_band=0.5)

        assert result.sentiment == "neutral"
        assert result.confidence == pytest.approx(0.75)

    def test_deterministic(self):
        text = "happy sad happy joy"
        assert classify_lexicon(text) == classify_lexicon(text)

    @pytest.mark.parametrize(
        "text",
        [
            "good",
            "bad bad bad",
            "best worst best",
            "lorem ipsum dolor",
            "love love love love hate",
        ],
    )
    def test_ranges(self, text):
        result = classify_lexicon(text)

        assert 0.0 <= result.confidence <= 1.0
        assert -1.0 <= result.score <= 1.0

"""
Word-list sentiment heuristic.

Counts marker words from fixed positive and negative lexicons and turns the
difference into a polarity score normalised by token count. Used on its own
when no embedding model is available and as the fallback for failed
embedding calls.

Usage:
    from src.sentiment.lexicon import classify_lexicon

    result = classify_lexicon("I love this, it is great and wonderful")
    # SentimentResult(sentiment="positive", confidence=0.375, score=0.375)
"""

from src.sentiment.schemas import SentimentLabel, SentimentResult

POSITIVE_WORDS: frozenset[str] = frozenset({
    "good", "great", "excellent", "amazing", "wonderful", "fantastic", "awesome",
    "love", "like", "happy", "joy", "pleased", "delighted", "satisfied",
    "best", "perfect", "brilliant", "outstanding", "superb", "marvelous",
})

NEGATIVE_WORDS: frozenset[str] = frozenset({
    "bad", "terrible", "awful", "horrible", "hate", "dislike", "sad", "angry",
    "upset", "disappointed", "frustrated", "annoyed", "irritated", "mad",
    "worst", "poor", "dreadful", "atrocious", "abysmal", "lousy",
})

NEUTRAL_BAND = 0.1


def tokenize(text: str) -> list[str]:
    """Lower-case and split on runs of whitespace. Punctuation stays attached."""
    return text.lower().split()


def count_lexicon_hits(tokens: list[str]) -> tuple[int, int]:
    """Return (positive, negative) hit counts, one per token occurrence."""
    positive = sum(1 for token in tokens if token in POSITIVE_WORDS)
    negative = sum(1 for token in tokens if token in NEGATIVE_WORDS)
    return positive, negative


def classify_lexicon(text: str, neutral_band: float = NEUTRAL_BAND) -> SentimentResult:
    """
    Classify text by lexicon hit counts.

    Pure and total: any string, including empty, yields a result.

    Args:
        text: Text to classify
        neutral_band: |score| below this is neutral

    Returns:
        SentimentResult with score = (positive - negative) / token count
    """
    if not text.strip():
        return SentimentResult.empty()

    tokens = tokenize(text)
    positive, negative = count_lexicon_hits(tokens)
    score = (positive - negative) / max(len(tokens), 1)

    label: SentimentLabel
    if abs(score) < neutral_band:
        label = "neutral"
        confidence = 1 - abs(score)
    elif score > 0:
        label = "positive"
        confidence = score
    else:
        label = "negative"
        confidence = abs(score)

    return SentimentResult(
        sentiment=label,
        confidence=max(0.0, min(1.0, confidence)),
        score=score,
    )

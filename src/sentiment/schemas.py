"""Data types shared by the sentiment classifiers, scheduler and result store."""

from dataclasses import asdict, dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SentimentLabel = Literal["positive", "negative", "neutral"]

SENTIMENT_LABELS: tuple[str, ...] = ("positive", "negative", "neutral")


@dataclass(frozen=True)
class SentimentResult:
    """
    Outcome of classifying one text.

    - sentiment: positive | negative | neutral
    - confidence: [0, 1]
    - score: signed polarity in [-1, 1]
    """

    sentiment: SentimentLabel
    confidence: float
    score: float

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        if self.sentiment not in SENTIMENT_LABELS:
            raise ValueError(f"Invalid sentiment: {self.sentiment}")
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError(f"Confidence must be 0-1, got {self.confidence}")
        if not (-1.0 <= self.score <= 1.0):
            raise ValueError(f"Score must be -1..1, got {self.score}")

    @classmethod
    def empty(cls) -> "SentimentResult":
        """Result for empty or whitespace-only text."""
        return cls(sentiment="neutral", confidence=0.0, score=0.0)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class WidgetSettings(BaseModel):
    """
    User-facing analysis settings.

    ``threshold`` is advisory and only echoed back to the presentation
    layer; classification never reads it. Only ``real_time`` changes
    scheduling.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    threshold: float = Field(default=0.5, ge=0.1, le=0.9)
    show_confidence: bool = True
    real_time: bool = True


@dataclass(frozen=True)
class AnalysisRequest:
    """Text snapshot tagged with the scheduler generation that requested it."""

    generation: int
    text: str

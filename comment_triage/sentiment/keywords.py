"""Keyword-count sentiment heuristic.

Deliberately simple: counts configured positive and negative keywords
found anywhere in the lower-cased comment. Keywords match as plain
substrings, so "good" also matches inside "goodness".
"""

from __future__ import annotations

from collections.abc import Iterable

from ..models import Category

DEFAULT_POSITIVE_WORDS = (
    "good",
    "great",
    "awesome",
    "excellent",
    "amazing",
    "love",
    "nice",
    "thank",
    "thanks",
    "helpful",
    "best",
    "enjoyed",
    "wonderful",
    "fantastic",
    "brilliant",
    "perfect",
)

DEFAULT_NEGATIVE_WORDS = (
    "bad",
    "terrible",
    "awful",
    "hate",
    "worst",
    "boring",
    "poor",
    "useless",
    "waste",
    "dislike",
    "horrible",
    "disappointing",
    "annoying",
    "wrong",
    "stupid",
)


class KeywordSentimentClassifier:
    """Positive/negative/neutral by comparing keyword hit counts."""

    def __init__(
        self,
        positive_words: Iterable[str] = DEFAULT_POSITIVE_WORDS,
        negative_words: Iterable[str] = DEFAULT_NEGATIVE_WORDS,
    ):
        self.positive_words = tuple(w.lower() for w in positive_words)
        self.negative_words = tuple(w.lower() for w in negative_words)

    def count_matches(self, comment: str) -> tuple[int, int]:
        """Return (positive hits, negative hits); each keyword counts once."""
        lower = comment.lower()
        positive = sum(1 for word in self.positive_words if word in lower)
        negative = sum(1 for word in self.negative_words if word in lower)
        return positive, negative

    def classify(self, comment: str) -> Category:
        """Classify a comment. Ties (including no hits) are neutral."""
        if not comment or not comment.strip():
            return Category.NEUTRAL

        positive, negative = self.count_matches(comment)

        if positive > negative:
            return Category.POSITIVE
        elif negative > positive:
            return Category.NEGATIVE
        else:
            return Category.NEUTRAL

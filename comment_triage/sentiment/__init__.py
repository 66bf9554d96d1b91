"""Keyword sentiment for comments that are not spam."""

from .keywords import DEFAULT_NEGATIVE_WORDS, DEFAULT_POSITIVE_WORDS, KeywordSentimentClassifier

__all__ = [
    "KeywordSentimentClassifier",
    "DEFAULT_POSITIVE_WORDS",
    "DEFAULT_NEGATIVE_WORDS",
]

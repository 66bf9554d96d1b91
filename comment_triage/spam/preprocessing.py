"""Tokenization shared by embedding training and comment vectorization."""

from __future__ import annotations

import re

# Function words carry no spam/non-spam signal
STOPWORDS = frozenset(
    [
        "the",
        "an",
        "and",
        "or",
        "but",
        "in",
        "on",
        "at",
        "to",
        "for",
        "of",
        "with",
        "by",
        "from",
        "as",
        "is",
        "was",
        "are",
        "were",
        "been",
        "be",
        "am",
        "have",
        "has",
        "had",
        "do",
        "does",
        "did",
        "it",
        "its",
        "this",
        "that",
        "these",
        "those",
        "here",
        "there",
        "me",
        "you",
        "we",
        "he",
        "she",
        "they",
        "them",
        "if",
        "so",
        "than",
        "too",
        "very",
        "ve",
        "ll",
        "re",
    ]
)

# Letters only; digits and punctuation act as separators
_TOKEN = re.compile(r"[a-z]+")


def tokenize(text: str) -> list[str]:
    """Lower-case text and split it into signal-bearing tokens.

    Drops single letters and stopwords, e.g.
    "Buy cheap products now! Click here" -> ["buy", "cheap", "products", "now", "click"]
    """
    if not text:
        return []

    tokens = _TOKEN.findall(text.lower())
    return [t for t in tokens if len(t) > 1 and t not in STOPWORDS]

"""Spam detection by similarity to curated example sentences.

Decision order:
1. Blank comments are never spam.
2. A URL is spam, no scoring needed.
3. Otherwise the comment vector is compared (cosine) with every spam and
   non-spam reference sentence. It is spam only if its best spam match
   beats its best non-spam match AND clears the threshold.

If scoring itself fails, a keyword check answers instead so a broken
model degrades accuracy rather than availability.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import numpy as np

from .corpus import DEFAULT_CORPUS, ReferenceCorpus
from .embedding import EmbeddingModel
from .vectorizer import TextVectorizer, cosine_similarity

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(
    r"\b(?:https?|ftp|file)://[-A-Za-z0-9+&@#/%?=~_|!:,.;]*[-A-Za-z0-9+&@#/%=~_|]",
    re.IGNORECASE,
)

# Used only when similarity scoring raises
FALLBACK_KEYWORDS = ("buy", "cheap", "discount")

DEFAULT_THRESHOLD = 0.5


@dataclass
class SpamScores:
    """Best cosine similarity against each reference set."""

    max_spam: float
    max_non_spam: float

    def is_spam(self, threshold: float) -> bool:
        return self.max_spam > self.max_non_spam and self.max_spam > threshold


def has_url(comment: str) -> bool:
    return bool(URL_PATTERN.search(comment))


def keyword_fallback(comment: str) -> bool:
    lower = comment.lower()
    return any(keyword in lower for keyword in FALLBACK_KEYWORDS)


class SpamClassifier:
    """Classify comments as spam using the reference corpus."""

    def __init__(
        self,
        model: EmbeddingModel,
        corpus: ReferenceCorpus = DEFAULT_CORPUS,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.vectorizer = TextVectorizer(model)
        self.threshold = threshold
        self._corpus = corpus

        # The corpus never changes, so its vectors are computed once
        self._spam_vectors = [self.vectorizer.vectorize(s) for s in corpus.spam]
        self._non_spam_vectors = [self.vectorizer.vectorize(s) for s in corpus.non_spam]

    def similarity_scores(self, comment: str) -> SpamScores:
        """Score a comment against both reference sets. May raise."""
        vector = self.vectorizer.vectorize(comment)
        return SpamScores(
            max_spam=_max_similarity(vector, self._spam_vectors),
            max_non_spam=_max_similarity(vector, self._non_spam_vectors),
        )

    def is_spam(self, comment: str) -> bool:
        """Never raises; see the module docstring for the decision order."""
        if not comment or not comment.strip():
            return False

        if has_url(comment):
            logger.debug("Comment contains URL, classified as spam")
            return True

        try:
            scores = self.similarity_scores(comment)
        except Exception as e:
            logger.error(f"Error scoring comment for spam, using keyword fallback: {type(e).__name__}: {e}")
            return keyword_fallback(comment)

        spam = scores.is_spam(self.threshold)
        if spam:
            logger.debug(
                f"Comment classified as spam with spam similarity: {scores.max_spam:.3f}, "
                f"non-spam similarity: {scores.max_non_spam:.3f}"
            )
        return spam

    def detect_spam_comments(self, comments: list[str]) -> list[str]:
        """Return the spam comments, in input order."""
        logger.info(f"Detecting spam in {len(comments)} comments")
        spam = [c for c in comments if self.is_spam(c)]
        logger.info(f"Found {len(spam)} spam comments")
        return spam


def _max_similarity(vector: np.ndarray, references: list[np.ndarray]) -> float:
    # Starts at 0.0: negative similarity counts as no match
    best = 0.0
    for reference in references:
        best = max(best, cosine_similarity(vector, reference))
    return best

"""Comment vectors as the mean of their word vectors."""

from __future__ import annotations

import math

import numpy as np

from .embedding import EmbeddingModel
from .preprocessing import tokenize


class TextVectorizer:
    """Reduce text to a single fixed-size vector."""

    def __init__(self, model: EmbeddingModel):
        self.model = model

    def zeros(self) -> np.ndarray:
        return np.zeros(self.model.vector_size, dtype=np.float32)

    def vectorize(self, text: str) -> np.ndarray:
        """Element-wise mean of the in-vocabulary token vectors.

        Unknown tokens are skipped (they do not count in the mean). Empty
        or fully unknown text gives the zero vector.
        """
        if not text or not text.strip():
            return self.zeros()

        known = [v for v in (self.model.vector(t) for t in tokenize(text)) if v is not None]
        if not known:
            return self.zeros()

        return np.mean(known, axis=0, dtype=np.float64).astype(np.float32)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine of the angle between two vectors.

    0.0 when either vector has zero magnitude, otherwise clamped to
    [-1, 1] to absorb floating point drift.
    """
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(a, b)) / (norm_a * norm_b)
    if math.isnan(similarity):
        return 0.0
    return max(-1.0, min(1.0, similarity))

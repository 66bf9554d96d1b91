"""Word embeddings trained on the reference corpus.

A shallow word2vec model (gensim) over a couple of dozen example
sentences. It is not expected to converge to anything linguistically
meaningful; it only needs to place comments that reuse spam vocabulary
closer to the spam examples than to the non-spam ones.

Training is seeded and single-threaded, so two builds from the same
corpus and settings produce identical vectors.

Requires: gensim, numpy
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import numpy as np
from gensim.models import KeyedVectors, Word2Vec

from .corpus import DEFAULT_CORPUS, ReferenceCorpus
from .preprocessing import tokenize

logger = logging.getLogger(__name__)

TRAINING_EPOCHS = 5
SEED = 42


class ModelUnavailableError(RuntimeError):
    """No embedding model could be loaded or built."""


class EmbeddingModel:
    """Immutable word -> vector mapping.

    Shared by every classification unit, so the backing array is made
    read-only and lookups never add words.
    """

    def __init__(self, vectors: KeyedVectors):
        self._vectors = vectors
        self._vectors.vectors.flags.writeable = False

    @classmethod
    def build(
        cls,
        sentences: Iterable[str],
        vector_size: int = 100,
        window_size: int = 5,
        min_word_frequency: int = 1,
    ) -> EmbeddingModel:
        """Train a new model on raw sentences.

        Tokens seen fewer than ``min_word_frequency`` times are left out
        of the vocabulary.

        Raises:
            ModelUnavailableError: The corpus yields no vocabulary.
        """
        corpus = [tokens for tokens in (tokenize(s) for s in sentences) if tokens]
        if not corpus:
            raise ModelUnavailableError("Embedding corpus contains no usable tokens")

        logger.info(
            f"Training word2vec model: {len(corpus)} sentences, vector_size={vector_size}, "
            f"window={window_size}, min_count={min_word_frequency}"
        )
        try:
            model = Word2Vec(
                sentences=corpus,
                vector_size=vector_size,
                window=window_size,
                min_count=min_word_frequency,
                epochs=TRAINING_EPOCHS,
                seed=SEED,
                workers=1,  # Multiple workers make training order non-deterministic
            )
        except Exception as e:
            # gensim raises RuntimeError when min_count filters out every word
            raise ModelUnavailableError(f"Could not train embedding model: {e}") from e

        logger.info(f"Word2vec training complete: {len(model.wv)} words")
        return cls(model.wv)

    @classmethod
    def load(cls, path: Path | str, vector_size: int | None = None) -> EmbeddingModel | None:
        """Load a saved model, or None if there is no file at ``path``.

        Raises if the file is unreadable or its vector size differs from
        ``vector_size``.
        """
        path = Path(path)
        if not path.exists():
            return None

        vectors = KeyedVectors.load(str(path))
        if not isinstance(vectors, KeyedVectors):
            raise ValueError(f"{path} does not contain word vectors")
        if vector_size is not None and vectors.vector_size != vector_size:
            raise ValueError(
                f"{path} holds {vectors.vector_size}-dimensional vectors, expected {vector_size}"
            )

        return cls(vectors)

    def save(self, path: Path | str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._vectors.save(str(path))
        logger.info(f"Embedding model saved to {path}")

    @property
    def vector_size(self) -> int:
        return self._vectors.vector_size

    @property
    def words(self) -> list[str]:
        """Vocabulary, most frequent first."""
        return list(self._vectors.index_to_key)

    def __len__(self) -> int:
        return len(self._vectors.index_to_key)

    def has_word(self, word: str) -> bool:
        return word.lower() in self._vectors.key_to_index

    def vector(self, word: str) -> np.ndarray | None:
        """Vector for ``word``, or None if it is not in the vocabulary."""
        key = word.lower()
        if key not in self._vectors.key_to_index:
            return None
        return self._vectors.get_vector(key)


def load_or_build(
    path: Path | str | None,
    corpus: ReferenceCorpus = DEFAULT_CORPUS,
    vector_size: int = 100,
    window_size: int = 5,
    min_word_frequency: int = 1,
) -> EmbeddingModel:
    """Load the cached model at ``path`` or train a fresh one.

    A missing, corrupt or mismatched artifact is never fatal: the model is
    retrained from the corpus and written back to ``path``. With
    ``path=None`` the model lives in memory only.

    Raises:
        ModelUnavailableError: Training failed as well.
    """
    if path is not None:
        try:
            model = EmbeddingModel.load(path, vector_size=vector_size)
        except Exception as e:
            logger.error(f"Could not load embedding model from {path}: {type(e).__name__}: {e}")
            logger.info("Falling back to training a new model")
        else:
            if model is not None:
                logger.info(f"Loaded embedding model from {path} ({len(model)} words)")
                return model
            logger.info(f"No embedding model at {path}, training a new one")

    model = EmbeddingModel.build(
        corpus.sentences,
        vector_size=vector_size,
        window_size=window_size,
        min_word_frequency=min_word_frequency,
    )

    if path is not None:
        try:
            model.save(path)
        except OSError as e:
            logger.warning(f"Could not save embedding model to {path}: {e}")

    return model

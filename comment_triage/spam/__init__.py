"""Embedding-based spam detection.

This package provides:
- The reference corpus of spam / non-spam example sentences
- A word2vec embedding model trained on that corpus (gensim)
- Mean-of-word-vectors comment vectorization and cosine similarity
- The spam classifier with URL fast path and keyword fallback
"""

from .corpus import DEFAULT_CORPUS, NON_SPAM_EXAMPLES, SPAM_EXAMPLES, ReferenceCorpus
from .detector import SpamClassifier, SpamScores, has_url, keyword_fallback
from .embedding import EmbeddingModel, ModelUnavailableError, load_or_build
from .preprocessing import tokenize
from .vectorizer import TextVectorizer, cosine_similarity

__all__ = [
    # Corpus
    "ReferenceCorpus",
    "DEFAULT_CORPUS",
    "SPAM_EXAMPLES",
    "NON_SPAM_EXAMPLES",
    # Embeddings
    "EmbeddingModel",
    "ModelUnavailableError",
    "load_or_build",
    "tokenize",
    # Vectors
    "TextVectorizer",
    "cosine_similarity",
    # Classification
    "SpamClassifier",
    "SpamScores",
    "has_url",
    "keyword_fallback",
]

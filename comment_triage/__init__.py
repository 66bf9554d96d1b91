"""Comment triage: sort short comments into positive, negative, neutral and spam.

This package provides:
- Embedding-based spam detection with a URL fast path and keyword fallback
- Keyword-count sentiment for comments that are not spam
- A trio-based orchestrator that classifies a batch concurrently with a
  per-comment timeout, dropping slow or failing comments
"""

from .models import Category
from .sentiment import KeywordSentimentClassifier
from .spam import EmbeddingModel, ModelUnavailableError, SpamClassifier
from .triage import CategorizedBatch, ClassificationResult, CommentTriager, build_triager
from .triage_config import TriageConfig

__all__ = [
    "Category",
    "CategorizedBatch",
    "ClassificationResult",
    "CommentTriager",
    "build_triager",
    "TriageConfig",
    # Classifiers
    "SpamClassifier",
    "KeywordSentimentClassifier",
    "EmbeddingModel",
    "ModelUnavailableError",
]

"""Triage configuration loaded from YAML.

Example triage.yaml:

    spam:
      threshold: 0.5
    embedding:
      vector_size: 100
      window_size: 5
      min_word_frequency: 1
      model_path: ~/.cache/comment-triage/embeddings-100.kv
    triage:
      worker_pool_size: 5
      per_unit_timeout_seconds: 5
    sentiment:
      positive_words: [good, great, thanks]
      negative_words: [bad, worst, boring]

Every key is optional; missing keys fall back to the defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .config import TRIAGE_CONFIG
from .sentiment.keywords import DEFAULT_NEGATIVE_WORDS, DEFAULT_POSITIVE_WORDS

CONFIG_CANDIDATES = ["triage.yaml", ".triage.yaml", "triage.yml", ".triage.yml"]


@dataclass(frozen=True)
class TriageConfig:
    """Immutable settings shared by every triage component."""

    spam_threshold: float = 0.5
    embedding_vector_size: int = 100
    embedding_window_size: int = 5
    min_word_frequency: int = 1
    embedding_model_path: Path | None = None  # None keeps the model in memory only
    worker_pool_size: int = 5
    per_unit_timeout_seconds: float = 5
    positive_words: tuple[str, ...] = DEFAULT_POSITIVE_WORDS
    negative_words: tuple[str, ...] = DEFAULT_NEGATIVE_WORDS

    def __post_init__(self):
        if self.embedding_vector_size < 1:
            raise ValueError(f"embedding vector size must be positive, got {self.embedding_vector_size}")
        if self.embedding_window_size < 1:
            raise ValueError(f"embedding window size must be positive, got {self.embedding_window_size}")
        if self.min_word_frequency < 1:
            raise ValueError(f"min word frequency must be at least 1, got {self.min_word_frequency}")
        if self.worker_pool_size < 1:
            raise ValueError(f"worker pool size must be at least 1, got {self.worker_pool_size}")
        if self.per_unit_timeout_seconds <= 0:
            raise ValueError(f"per-unit timeout must be positive, got {self.per_unit_timeout_seconds}")

        # Keyword lists are matched against lower-cased comments
        object.__setattr__(self, "positive_words", _normalize_words(self.positive_words))
        object.__setattr__(self, "negative_words", _normalize_words(self.negative_words))
        if self.embedding_model_path is not None:
            object.__setattr__(
                self, "embedding_model_path", Path(self.embedding_model_path).expanduser()
            )

    @classmethod
    def load(cls, path: Path | str | None = None) -> TriageConfig:
        """Load config from YAML file or return defaults."""
        if path is None:
            path = TRIAGE_CONFIG

        if path is None:
            # Try common locations
            for candidate in CONFIG_CANDIDATES:
                if Path(candidate).exists():
                    path = candidate
                    break

        if path is None or not Path(path).exists():
            return cls.default()

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TriageConfig:
        """Create config from dictionary (e.g., parsed YAML)."""
        spam = data.get("spam") or {}
        embedding = data.get("embedding") or {}
        triage = data.get("triage") or {}
        sentiment = data.get("sentiment") or {}

        model_path = embedding.get("model_path")

        return cls(
            spam_threshold=float(spam.get("threshold", 0.5)),
            embedding_vector_size=int(embedding.get("vector_size", 100)),
            embedding_window_size=int(embedding.get("window_size", 5)),
            min_word_frequency=int(embedding.get("min_word_frequency", 1)),
            embedding_model_path=Path(model_path) if model_path else None,
            worker_pool_size=int(triage.get("worker_pool_size", 5)),
            per_unit_timeout_seconds=float(triage.get("per_unit_timeout_seconds", 5)),
            positive_words=_words_or_default(sentiment.get("positive_words"), DEFAULT_POSITIVE_WORDS),
            negative_words=_words_or_default(sentiment.get("negative_words"), DEFAULT_NEGATIVE_WORDS),
        )

    @classmethod
    def default(cls) -> TriageConfig:
        return cls()

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        embedding: dict[str, Any] = {
            "vector_size": self.embedding_vector_size,
            "window_size": self.embedding_window_size,
            "min_word_frequency": self.min_word_frequency,
        }
        if self.embedding_model_path is not None:
            embedding["model_path"] = str(self.embedding_model_path)

        data: dict[str, Any] = {
            "spam": {"threshold": self.spam_threshold},
            "embedding": embedding,
            "triage": {
                "worker_pool_size": self.worker_pool_size,
                "per_unit_timeout_seconds": self.per_unit_timeout_seconds,
            },
            "sentiment": {
                "positive_words": list(self.positive_words),
                "negative_words": list(self.negative_words),
            },
        }

        return yaml.dump(data, default_flow_style=False, sort_keys=False)


def _normalize_words(words) -> tuple[str, ...]:
    """Lower-case, strip and drop empty entries (e.g. from "a,,b")."""
    if isinstance(words, str):
        words = words.split(",")
    return tuple(w.strip().lower() for w in words if w and w.strip())


def _words_or_default(words, default: tuple[str, ...]):
    # A key left empty in YAML parses as None
    return default if words is None else words

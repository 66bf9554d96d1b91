"""Shared test fixtures."""

import pytest


@pytest.fixture(scope="session")
def embedding_model():
    """Embedding model trained on the default reference corpus.

    Training is seeded, so every test session sees the same vectors.
    """
    from comment_triage.spam import DEFAULT_CORPUS, EmbeddingModel

    return EmbeddingModel.build(DEFAULT_CORPUS.sentences)


@pytest.fixture
def spam_classifier(embedding_model):
    from comment_triage.spam import SpamClassifier

    return SpamClassifier(embedding_model)


@pytest.fixture
def sentiment_classifier():
    from comment_triage.sentiment import KeywordSentimentClassifier

    return KeywordSentimentClassifier()


@pytest.fixture
def triager(spam_classifier, sentiment_classifier):
    from comment_triage.triage import CommentTriager

    return CommentTriager(spam_classifier, sentiment_classifier)


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Keep model caches and log files out of the real home directory."""
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))

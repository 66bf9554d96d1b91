"""Tests for the concurrent triage orchestrator."""

import threading
import time

import pytest
import trio

from comment_triage.models import Category
from comment_triage.triage import (
    CategorizedBatch,
    ClassificationResult,
    CommentTriager,
    build_triager,
)
from comment_triage.triage_config import TriageConfig


class StubSpamClassifier:
    """Spam if the comment starts with "spam"; records concurrency."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def is_spam(self, comment):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            return comment.startswith("spam")
        finally:
            with self._lock:
                self.active -= 1


class StubSentimentClassifier:
    """Counts calls; "good" is positive, "bad" is negative."""

    def __init__(self):
        self.calls = []

    def classify(self, comment):
        self.calls.append(comment)
        if "good" in comment:
            return Category.POSITIVE
        if "bad" in comment:
            return Category.NEGATIVE
        return Category.NEUTRAL


class TestCategorizedBatch:
    """Test the result container."""

    def test_all_categories_present(self):
        batch = CategorizedBatch()
        assert set(batch.as_dict()) == {"positive", "negative", "neutral", "spam"}
        assert batch.total == 0
        assert batch.dropped == 0

    def test_add_and_lookup(self):
        batch = CategorizedBatch()
        batch.add(ClassificationResult(Category.SPAM, "buy now"))
        assert batch["spam"] == ["buy now"]
        assert batch[Category.SPAM] == ["buy now"]
        assert batch.counts == {"positive": 0, "negative": 0, "neutral": 0, "spam": 1}
        assert batch.total == 1

    def test_as_dict_is_a_copy(self):
        batch = CategorizedBatch()
        batch.add(ClassificationResult(Category.NEUTRAL, "meh"))
        batch.as_dict()["neutral"].append("sneaky")
        assert batch["neutral"] == ["meh"]


class TestClassifyComment:
    """Test per-comment classification."""

    def test_spam_skips_sentiment(self):
        sentiment = StubSentimentClassifier()
        triager = CommentTriager(StubSpamClassifier(), sentiment)

        result = triager.classify_comment("spam: good deals")
        assert result == ClassificationResult(Category.SPAM, "spam: good deals")
        assert sentiment.calls == []

    def test_sentiment_when_not_spam(self):
        sentiment = StubSentimentClassifier()
        triager = CommentTriager(StubSpamClassifier(), sentiment)

        assert triager.classify_comment("good stuff").category == Category.POSITIVE
        assert sentiment.calls == ["good stuff"]


class TestValidation:
    """Test constructor argument checks."""

    def test_pool_size(self):
        with pytest.raises(ValueError, match="worker pool size"):
            CommentTriager(StubSpamClassifier(), StubSentimentClassifier(), worker_pool_size=0)

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_timeout(self, timeout):
        with pytest.raises(ValueError, match="timeout"):
            CommentTriager(
                StubSpamClassifier(), StubSentimentClassifier(), per_unit_timeout_seconds=timeout
            )


class TestTriage:
    """Test batch triage with stub classifiers."""

    @pytest.fixture
    def stub_triager(self):
        return CommentTriager(StubSpamClassifier(), StubSentimentClassifier())

    @pytest.mark.trio
    async def test_async_triage(self, stub_triager):
        batch = await stub_triager.triage(["good one", "bad one", "spam here", "plain"])
        assert batch.counts == {"positive": 1, "negative": 1, "neutral": 1, "spam": 1}
        assert batch["spam"] == ["spam here"]
        assert batch.dropped == 0

    def test_sync_triage(self, stub_triager):
        batch = stub_triager.triage_sync(["good one", "good two", "spam"])
        assert sorted(batch["positive"]) == ["good one", "good two"]
        assert batch["spam"] == ["spam"]

    def test_empty_batch(self, stub_triager):
        batch = stub_triager.triage_sync([])
        assert batch.as_dict() == {"positive": [], "negative": [], "neutral": [], "spam": []}

    def test_every_comment_in_exactly_one_bucket(self, stub_triager):
        comments = [f"good {i}" if i % 3 else f"spam {i}" for i in range(30)]
        batch = stub_triager.triage_sync(comments)

        flattened = [c for texts in batch.buckets.values() for c in texts]
        assert sorted(flattened) == sorted(comments)
        assert batch.total + batch.dropped == len(comments)

    def test_duplicates_kept(self, stub_triager):
        batch = stub_triager.triage_sync(["plain", "plain", "plain"])
        assert batch["neutral"] == ["plain", "plain", "plain"]

    def test_pool_size_caps_concurrency(self):
        spam = StubSpamClassifier(delay=0.05)
        triager = CommentTriager(spam, StubSentimentClassifier(), worker_pool_size=2)

        batch = triager.triage_sync([f"comment {i}" for i in range(8)])
        assert batch.total == 8
        assert spam.max_active <= 2

    def test_units_run_concurrently(self):
        spam = StubSpamClassifier(delay=0.1)
        triager = CommentTriager(spam, StubSentimentClassifier(), worker_pool_size=4)

        batch = triager.triage_sync([f"comment {i}" for i in range(4)])
        assert batch.total == 4
        assert spam.max_active > 1

    def test_queueing_does_not_count_against_timeout(self):
        """Waiting for a worker slot is not part of the per-unit timeout."""
        spam = StubSpamClassifier(delay=0.1)
        triager = CommentTriager(
            spam, StubSentimentClassifier(), worker_pool_size=1, per_unit_timeout_seconds=0.5
        )

        batch = triager.triage_sync([f"comment {i}" for i in range(8)])
        assert batch.total == 8
        assert batch.dropped == 0


class TestDroppedUnits:
    """Test that slow or failing units are dropped without aborting the batch."""

    def test_timeout_drops_comment(self):
        release = threading.Event()

        class SlowSpamClassifier:
            def is_spam(self, comment):
                if comment == "slow":
                    release.wait(5)
                return False

        triager = CommentTriager(
            SlowSpamClassifier(), StubSentimentClassifier(), per_unit_timeout_seconds=0.1
        )
        try:
            batch = triager.triage_sync(["good", "slow", "bad"])
        finally:
            release.set()

        assert batch["positive"] == ["good"]
        assert batch["negative"] == ["bad"]
        assert "slow" not in [c for texts in batch.buckets.values() for c in texts]
        assert batch.dropped == 1

    def test_failure_drops_comment(self):
        class FlakySpamClassifier:
            def is_spam(self, comment):
                if comment == "explode":
                    raise RuntimeError("classifier crashed")
                return False

        triager = CommentTriager(FlakySpamClassifier(), StubSentimentClassifier())
        batch = triager.triage_sync(["good", "explode", "plain"])

        assert batch.total == 2
        assert batch.dropped == 1
        assert batch["positive"] == ["good"]
        assert batch["neutral"] == ["plain"]

    def test_all_units_fail(self):
        class BrokenSpamClassifier:
            def is_spam(self, comment):
                raise ValueError("nope")

        triager = CommentTriager(BrokenSpamClassifier(), StubSentimentClassifier())
        batch = triager.triage_sync(["a", "b", "c"])

        assert batch.total == 0
        assert batch.dropped == 3

    def test_failed_slot_is_released(self):
        """A failing unit gives its slot back so the batch still completes."""

        class FlakySpamClassifier:
            def is_spam(self, comment):
                if comment.startswith("explode"):
                    raise RuntimeError("classifier crashed")
                return False

        triager = CommentTriager(
            FlakySpamClassifier(), StubSentimentClassifier(), worker_pool_size=1
        )
        batch = triager.triage_sync(["explode 1", "explode 2", "good", "bad"])

        assert batch.dropped == 2
        assert batch.total == 2


class HangingSpamClassifier:
    """Blocks on "hang" until released; records concurrency."""

    def __init__(self):
        self.release = threading.Event()
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def is_spam(self, comment):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if comment == "hang":
                self.release.wait(5)
            return False
        finally:
            with self._lock:
                self.active -= 1


class TestHungUnits:
    """Test that a hung unit neither exceeds the pool nor stalls other units."""

    @pytest.fixture
    def hanging(self):
        spam = HangingSpamClassifier()
        yield spam
        spam.release.set()

    @pytest.fixture
    def hang_triager(self, hanging):
        return CommentTriager(
            hanging, StubSentimentClassifier(), worker_pool_size=1, per_unit_timeout_seconds=0.2
        )

    def test_pool_bound_holds_across_batches(self, hanging, hang_triager):
        """A thread abandoned in one batch still counts against the next."""
        first = hang_triager.triage_sync(["hang"])
        assert first.dropped == 1

        second = hang_triager.triage_sync(["a", "b", "c"])
        assert hanging.max_active <= 1
        assert second.total == 0
        assert second.dropped == 3

    def test_slot_freed_once_hung_unit_finishes(self, hanging, hang_triager):
        hang_triager.triage_sync(["hang"])
        hanging.release.set()

        batch = hang_triager.triage_sync(["good", "bad"])
        assert batch.dropped == 0
        assert batch["positive"] == ["good"]
        assert batch["negative"] == ["bad"]

    def test_slot_wait_is_bounded(self, hanging, hang_triager):
        """Units queued behind a hung unit are dropped, not stalled."""
        start = time.monotonic()
        batch = hang_triager.triage_sync(["hang", "a", "b"])
        elapsed = time.monotonic() - start

        assert elapsed < 2.0
        assert "hang" not in [c for texts in batch.buckets.values() for c in texts]
        assert batch.total + batch.dropped == 3

    def test_hung_unit_holds_only_slot_first(self, hanging, hang_triager):
        """With the hung unit already holding the slot, the batch still returns quickly."""
        hang_triager.triage_sync(["hang"])

        start = time.monotonic()
        batch = hang_triager.triage_sync(["a", "b"])
        elapsed = time.monotonic() - start

        assert elapsed < 2.0
        assert batch.dropped == 2


class TestEndToEnd:
    """Triage with the real embedding-based classifiers."""

    SCENARIO = [
        "Buy cheap stuff now!!",
        "Great video, thanks!",
        "meh",
        "http://spam.example/promo",
    ]

    def test_scenario(self, triager):
        batch = triager.triage_sync(self.SCENARIO)

        assert batch.counts == {"positive": 1, "negative": 0, "neutral": 1, "spam": 2}
        assert sorted(batch["spam"]) == ["Buy cheap stuff now!!", "http://spam.example/promo"]
        assert batch["positive"] == ["Great video, thanks!"]
        assert batch["neutral"] == ["meh"]

    def test_idempotent(self, triager):
        first = triager.triage_sync(self.SCENARIO)
        second = triager.triage_sync(self.SCENARIO)

        for category in Category:
            assert sorted(first[category]) == sorted(second[category])

    @pytest.mark.trio
    async def test_async_scenario(self, triager):
        batch = await triager.triage(self.SCENARIO)
        assert batch.total == 4

    def test_blank_comment(self, triager):
        batch = triager.triage_sync(["", "   "])
        assert batch.counts == {"positive": 0, "negative": 0, "neutral": 2, "spam": 0}


class TestBuildTriager:
    """Test wiring a triager from config."""

    def test_from_config(self, tmp_path):
        model_path = tmp_path / "models" / "embeddings-32.kv"
        config = TriageConfig(
            embedding_vector_size=32,
            embedding_model_path=model_path,
            worker_pool_size=3,
            per_unit_timeout_seconds=2.5,
            spam_threshold=0.7,
        )
        triager = build_triager(config)

        assert model_path.exists()
        assert triager.worker_pool_size == 3
        assert triager.per_unit_timeout_seconds == 2.5
        assert triager.spam_classifier.threshold == 0.7
        assert triager.spam_classifier.vectorizer.zeros().shape == (32,)

    def test_custom_sentiment_words(self):
        config = TriageConfig(positive_words=("rad",), negative_words=("lame",))
        triager = build_triager(config)

        batch = triager.triage_sync(["so rad", "kinda lame", "great"])
        assert batch["positive"] == ["so rad"]
        assert batch["negative"] == ["kinda lame"]
        assert batch["neutral"] == ["great"]

    def test_defaults(self):
        triager = build_triager()
        assert triager.worker_pool_size == 5
        assert triager.per_unit_timeout_seconds == 5

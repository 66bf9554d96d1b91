"""Concurrent triage of a batch of comments.

Uses trio to fan comments out to worker threads, one classification unit
per comment:
- At most ``worker_pool_size`` units run at once, counted across every
  batch the triager has ever started, not just the current one
- A unit waits at most ``per_unit_timeout_seconds`` for a worker slot,
  then gets ``per_unit_timeout_seconds`` more to classify
- A unit that times out is abandoned: its thread keeps running (and keeps
  its slot, even into later batches) but its result is thrown away
- A unit that times out, finds no free slot, or raises is dropped from the
  output, never retried

Results are folded into the buckets by the coordinating trio task only,
so the buckets need no locking.
"""

import logging
import threading
import traceback
from collections.abc import Sequence
from dataclasses import dataclass, field

import trio

from .models import Category
from .sentiment import KeywordSentimentClassifier
from .spam import DEFAULT_CORPUS, ReferenceCorpus, SpamClassifier, load_or_build
from .triage_config import TriageConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """Category assigned to one comment."""

    category: Category
    text: str


@dataclass
class CategorizedBatch:
    """Comments grouped by category.

    All four categories are always present. Within a category, comments
    are in the order their units finished, not input order.
    """

    buckets: dict[Category, list[str]] = field(
        default_factory=lambda: {category: [] for category in Category}
    )
    dropped: int = 0  # Units that timed out or failed

    def add(self, result: ClassificationResult) -> None:
        self.buckets[result.category].append(result.text)

    def __getitem__(self, category: Category | str) -> list[str]:
        return self.buckets[Category(category)]

    def as_dict(self) -> dict[str, list[str]]:
        """Plain mapping of category name to comments."""
        return {category.value: list(texts) for category, texts in self.buckets.items()}

    @property
    def counts(self) -> dict[str, int]:
        return {category.value: len(texts) for category, texts in self.buckets.items()}

    @property
    def total(self) -> int:
        return sum(len(texts) for texts in self.buckets.values())


class _WorkerSlot:
    """One held slot of the triager's worker pool, released exactly once.

    Whoever claims it first owns the release: the worker thread when it
    starts classifying (it releases when done, however late), or the
    coordinator when the unit ended before its thread got going.
    """

    def __init__(self, slots: threading.BoundedSemaphore):
        self._slots = slots
        self._lock = threading.Lock()
        self._claimed = False

    def claim(self) -> bool:
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            return True

    def release(self) -> None:
        self._slots.release()


class CommentTriager:
    """Fan a batch of comments out to spam and sentiment classification."""

    def __init__(
        self,
        spam_classifier: SpamClassifier,
        sentiment_classifier: KeywordSentimentClassifier,
        worker_pool_size: int = 5,
        per_unit_timeout_seconds: float = 5,
    ):
        if worker_pool_size < 1:
            raise ValueError(f"worker pool size must be at least 1, got {worker_pool_size}")
        if per_unit_timeout_seconds <= 0:
            raise ValueError(f"per-unit timeout must be positive, got {per_unit_timeout_seconds}")

        self.spam_classifier = spam_classifier
        self.sentiment_classifier = sentiment_classifier
        self.worker_pool_size = worker_pool_size
        self.per_unit_timeout_seconds = per_unit_timeout_seconds

        # Worker slots live as long as the triager: an abandoned thread
        # keeps its slot until it finishes, even after its trio run ended.
        # Threads come from trio's process-wide cache.
        self._slots = threading.BoundedSemaphore(worker_pool_size)

        # Paces submission within one trio run so that queued units wait
        # in trio rather than on a thread each
        self._pacer_var = trio.lowlevel.RunVar(f"comment_triage_pacer_{id(self)}")

    def _pacer(self) -> trio.CapacityLimiter:
        try:
            return self._pacer_var.get()
        except LookupError:
            pacer = trio.CapacityLimiter(self.worker_pool_size)
            self._pacer_var.set(pacer)
            return pacer

    def classify_comment(self, comment: str) -> ClassificationResult:
        """Classify one comment. Sentiment is skipped for spam."""
        if self.spam_classifier.is_spam(comment):
            return ClassificationResult(Category.SPAM, comment)
        return ClassificationResult(self.sentiment_classifier.classify(comment), comment)

    def _classify_in_slot(self, slot: _WorkerSlot, comment: str) -> ClassificationResult | None:
        """Worker thread body. Returns None if the unit was already given up."""
        if not slot.claim():
            return None
        try:
            return self.classify_comment(comment)
        finally:
            slot.release()

    async def _run_unit(
        self,
        pacer: trio.CapacityLimiter,
        index: int,
        comment: str,
        batch: CategorizedBatch,
    ) -> None:
        async with pacer:
            await self._run_unit_in_slot(index, comment, batch)

    async def _run_unit_in_slot(self, index: int, comment: str, batch: CategorizedBatch) -> None:
        """Classify one comment on a worker thread and fold the result in."""
        timeout = self.per_unit_timeout_seconds

        # Bounded wait, so a slot held by a hung thread cannot stall the batch
        acquired = await trio.to_thread.run_sync(self._slots.acquire, True, timeout)
        if not acquired:
            batch.dropped += 1
            logger.warning(f"Comment #{index} got no worker slot within {timeout}s, dropped")
            return

        slot = _WorkerSlot(self._slots)
        try:
            with trio.move_on_after(timeout) as scope:
                result = await trio.to_thread.run_sync(
                    self._classify_in_slot,
                    slot,
                    comment,
                    abandon_on_cancel=True,
                )
        except Exception as e:
            batch.dropped += 1
            logger.error(f"Comment #{index} failed: {type(e).__name__}: {e}")
            logger.error(traceback.format_exc())
            return
        finally:
            if slot.claim():
                slot.release()

        if scope.cancelled_caught:
            batch.dropped += 1
            logger.warning(
                f"Comment #{index} timed out after {self.per_unit_timeout_seconds}s, dropped"
            )
            return

        batch.add(result)

    async def triage(self, comments: Sequence[str]) -> CategorizedBatch:
        """Triage a batch; returns once every unit finished or timed out.

        Never raises because of an individual comment.
        """
        batch = CategorizedBatch()
        if not comments:
            return batch

        logger.info(
            f"Triaging {len(comments)} comments "
            f"(workers: {self.worker_pool_size}, timeout: {self.per_unit_timeout_seconds}s)"
        )
        pacer = self._pacer()

        async with trio.open_nursery() as nursery:
            for index, comment in enumerate(comments):
                nursery.start_soon(self._run_unit, pacer, index, comment, batch)

        counts = batch.counts
        logger.info(
            f"Triage complete: {batch.total} categorized, {batch.dropped} dropped "
            f"({counts['positive']} positive, {counts['negative']} negative, "
            f"{counts['neutral']} neutral, {counts['spam']} spam)"
        )
        return batch

    def triage_sync(self, comments: Sequence[str]) -> CategorizedBatch:
        """Blocking wrapper around :meth:`triage` for non-async callers."""
        return trio.run(self.triage, list(comments))


def build_triager(
    config: TriageConfig | None = None,
    corpus: ReferenceCorpus = DEFAULT_CORPUS,
) -> CommentTriager:
    """Wire a triager from config: embedding model, classifiers, pool.

    Raises:
        ModelUnavailableError: No embedding model could be loaded or trained.
    """
    config = config or TriageConfig.default()

    model = load_or_build(
        config.embedding_model_path,
        corpus=corpus,
        vector_size=config.embedding_vector_size,
        window_size=config.embedding_window_size,
        min_word_frequency=config.min_word_frequency,
    )
    spam_classifier = SpamClassifier(model, corpus=corpus, threshold=config.spam_threshold)
    sentiment_classifier = KeywordSentimentClassifier(config.positive_words, config.negative_words)

    return CommentTriager(
        spam_classifier,
        sentiment_classifier,
        worker_pool_size=config.worker_pool_size,
        per_unit_timeout_seconds=config.per_unit_timeout_seconds,
    )

"""Curated reference sentences for similarity-based spam detection."""

from __future__ import annotations

from dataclasses import dataclass

SPAM_EXAMPLES = (
    "Buy cheap products now! Click here for amazing deals!",
    "Make money fast! Work from home and earn thousands!",
    "Free giveaway! Enter now to win a prize!",
    "Check out my channel and subscribe for more content!",
    "Like and share this video for a chance to win!",
    "Follow me on social media for exclusive content!",
    "Limited time offer! Don't miss out on this opportunity!",
    "Investment opportunity! Guaranteed returns!",
    "Click the link in my bio for special access!",
    "Subscribe to my channel for daily uploads!",
)

NON_SPAM_EXAMPLES = (
    "Great video! Really enjoyed watching it.",
    "Thanks for sharing this information.",
    "I learned a lot from this content.",
    "This is one of the best videos on this topic.",
    "The explanation was very clear and helpful.",
    "I've been looking for this information for a while.",
    "This video helped me solve my problem.",
    "I appreciate the effort you put into making this.",
    "Looking forward to more content like this.",
    "This is exactly what I needed, thank you!",
)


@dataclass(frozen=True)
class ReferenceCorpus:
    """Two disjoint, ordered sets of example sentences."""

    spam: tuple[str, ...]
    non_spam: tuple[str, ...]

    def __post_init__(self):
        overlap = set(self.spam) & set(self.non_spam)
        if overlap:
            raise ValueError(f"Reference sets must be disjoint, both contain: {sorted(overlap)}")

    @property
    def sentences(self) -> tuple[str, ...]:
        """All sentences, spam first. This is the embedding training corpus."""
        return self.spam + self.non_spam


DEFAULT_CORPUS = ReferenceCorpus(spam=SPAM_EXAMPLES, non_spam=NON_SPAM_EXAMPLES)

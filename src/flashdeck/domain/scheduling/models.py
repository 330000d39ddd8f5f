"""
Domain models for card scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from typing import Any

from flashdeck.domain.constants import INITIAL_EASINESS


@dataclass(frozen=True)
class ReviewState:
    """
    SM-2 scheduling state of one card for one learner.

    Attributes:
        easiness: Interval growth factor, never below 1.3.
        interval: Days until the next review.
        repetition: Consecutive successful reviews since the last lapse.
        due_at: Epoch milliseconds when the card becomes eligible for review.
    """

    easiness: float
    interval: int
    repetition: int
    due_at: int

    def to_record(self) -> dict[str, Any]:
        """Field mapping stored on the flashcard record."""
        return {
            "easiness": self.easiness,
            "interval": self.interval,
            "repetition": self.repetition,
            "dueAt": self.due_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any], now: int) -> "ReviewState":
        """
        Build a state from a stored card record.

        Cards written before scheduling existed carry none of these fields,
        so each missing or null value falls back to the initial one (due immediately).
        """

        def field_or(key: str, default: Any) -> Any:
            value = record.get(key)
            return default if value is None else value

        return cls(
            easiness=float(field_or("easiness", INITIAL_EASINESS)),
            interval=int(field_or("interval", 0)),
            repetition=int(field_or("repetition", 0)),
            due_at=int(field_or("dueAt", now)),
        )


@dataclass(frozen=True)
class Flashcard:
    """
    A front/back card inside a library, with its scheduling state.

    `version` increments on every persisted write and is used for
    compare-and-set updates of `state`.
    """

    id: str
    library_id: str
    front: str
    back: str
    state: ReviewState
    created_at: int
    version: int = 0

    def is_due(self, now: int) -> bool:
        return self.state.due_at <= now

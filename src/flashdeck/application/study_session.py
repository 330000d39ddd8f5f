"""
Study sessions: application layer orchestrator.

Selects due cards from a library, runs each graded answer through the SM-2
scheduler and writes the new state back through the CardRepository port.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from flashdeck.application.config import AppConfig
from flashdeck.application.id_service import generate_card_id
from flashdeck.domain.scheduling.models import Flashcard
from flashdeck.domain.scheduling.ports import CardRepository
from flashdeck.domain.scheduling.sm2 import initialize_state, now_ms, review, validate_quality

logger = logging.getLogger(__name__)


def select_due_cards(
    cards: Iterable[Flashcard], now: int, limit: int | None = None
) -> list[Flashcard]:
    """
    Cards eligible for review at `now`, in their original order.

    Args:
        cards: Candidate cards, typically one library.
        now: Reference time in epoch ms.
        limit: Optional cap on the number of cards returned.
    """
    due = [card for card in cards if card.is_due(now)]
    if limit is not None:
        due = due[:limit]
    return due


class StudyService:
    """
    Application service for creating and reviewing cards.

    Depends on the CardRepository abstraction, not a concrete adapter.
    """

    def __init__(self, repo: CardRepository, config: AppConfig | None = None):
        self._repo = repo
        self._config = config or AppConfig()

    async def add_card(
        self, library_id: str, front: str, back: str, now: int | None = None
    ) -> Flashcard:
        """Create a card that is due immediately."""
        front = front.strip()
        back = back.strip()
        if not front or not back:
            raise ValueError("Card front and back must both be non-empty")

        if now is None:
            now = now_ms()
        card = Flashcard(
            id=generate_card_id(),
            library_id=library_id,
            front=front,
            back=back,
            state=initialize_state(now),
            created_at=now,
        )
        return await self._repo.add_card(card)

    async def due_cards(self, library_id: str, now: int | None = None) -> list[Flashcard]:
        if now is None:
            now = now_ms()
        cards = await self._repo.list_cards(library_id)
        return select_due_cards(cards, now, limit=self._config.session_limit)

    async def answer(self, card_id: str, quality: int, now: int | None = None) -> Flashcard:
        """
        Grade one review of a card and persist the resulting state.

        Raises:
            InvalidQualityError: quality is not an integer in 0..5.
            CardNotFoundError: no card has this ID.
            StaleCardStateError: the card was reviewed concurrently.
        """
        if now is None:
            now = now_ms()
        card = await self._repo.get_card(card_id)
        state = review(card.state, quality, now)
        updated = await self._repo.save_state(card.id, state, expected_version=card.version)
        logger.info(
            "Reviewed %s with q=%d: next in %d day(s), repetition %d",
            card.id,
            quality,
            state.interval,
            state.repetition,
        )
        return updated

    async def start_session(self, library_id: str, now: int | None = None) -> "StudySession":
        cards = await self.due_cards(library_id, now)
        logger.info("Study session for %s: %d due card(s)", library_id, len(cards))
        return StudySession(service=self, queue=cards)


@dataclass
class StudySession:
    """
    A snapshot of due cards worked through one answer at a time.

    Cards that become due after the session starts are not added.
    """

    service: StudyService
    queue: list[Flashcard]
    position: int = 0
    grades: Counter = field(default_factory=Counter)

    @property
    def current(self) -> Flashcard | None:
        if self.finished:
            return None
        return self.queue[self.position]

    @property
    def finished(self) -> bool:
        return self.position >= len(self.queue)

    @property
    def remaining(self) -> int:
        return len(self.queue) - self.position

    @property
    def reviewed(self) -> int:
        return self.position

    async def answer(self, quality: int, now: int | None = None) -> Flashcard:
        card = self.current
        if card is None:
            raise RuntimeError("Study session has no cards left")
        quality = validate_quality(quality)

        updated = await self.service.answer(card.id, quality, now)
        self.grades[quality] += 1
        self.position += 1
        return updated

"""
In-memory card repository: infrastructure adapter.

Implements CardRepository with a process-local dict. Writes are
compare-and-set on the card version, serialized by an asyncio.Lock.
"""

import asyncio
import logging
from dataclasses import replace

from flashdeck.domain.scheduling.errors import CardNotFoundError, StaleCardStateError
from flashdeck.domain.scheduling.models import Flashcard, ReviewState
from flashdeck.domain.scheduling.ports import CardRepository

logger = logging.getLogger(__name__)


class InMemoryCardRepository(CardRepository):
    def __init__(self) -> None:
        self._cards: dict[str, Flashcard] = {}
        self._lock = asyncio.Lock()

    async def add_card(self, card: Flashcard) -> Flashcard:
        async with self._lock:
            if card.id in self._cards:
                raise ValueError(f"Card already exists: {card.id}")
            self._cards[card.id] = card
        return card

    async def get_card(self, card_id: str) -> Flashcard:
        try:
            return self._cards[card_id]
        except KeyError:
            raise CardNotFoundError(card_id) from None

    async def list_cards(self, library_id: str) -> list[Flashcard]:
        # dicts keep insertion order
        return [c for c in self._cards.values() if c.library_id == library_id]

    async def save_state(
        self, card_id: str, state: ReviewState, expected_version: int
    ) -> Flashcard:
        async with self._lock:
            current = await self.get_card(card_id)
            if current.version != expected_version:
                logger.warning(
                    "Rejected stale write for card %s (expected v%d, stored v%d)",
                    card_id,
                    expected_version,
                    current.version,
                )
                raise StaleCardStateError(card_id, expected_version, current.version)

            updated = replace(current, state=state, version=current.version + 1)
            self._cards[card_id] = updated
            return updated

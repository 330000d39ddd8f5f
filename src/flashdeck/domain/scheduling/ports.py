"""
Ports (interfaces) for card storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Flashcard, ReviewState


class CardRepository(ABC):
    """
    Port for storing flashcards and their scheduling state.

    Implementations:
        - InMemoryCardRepository: process-local dict guarded by an asyncio.Lock.
    """

    @abstractmethod
    async def add_card(self, card: Flashcard) -> Flashcard:
        """Store a new card and return it as persisted."""
        pass

    @abstractmethod
    async def get_card(self, card_id: str) -> Flashcard:
        """
        Fetch one card.

        Raises:
            CardNotFoundError: no card has this ID.
        """
        pass

    @abstractmethod
    async def list_cards(self, library_id: str) -> list[Flashcard]:
        """All cards of a library, in insertion order."""
        pass

    @abstractmethod
    async def save_state(
        self, card_id: str, state: ReviewState, expected_version: int
    ) -> Flashcard:
        """
        Replace a card's scheduling state if nobody wrote it since it was read.

        Args:
            card_id: Card to update.
            state: New scheduling state.
            expected_version: Version of the card the state was computed from.

        Returns:
            The updated card, with version incremented.

        Raises:
            CardNotFoundError: no card has this ID.
            StaleCardStateError: the stored version differs from expected_version.
        """
        pass

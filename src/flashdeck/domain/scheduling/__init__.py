# Domain Scheduling Package
from .errors import CardNotFoundError, InvalidQualityError, StaleCardStateError
from .models import Flashcard, ReviewState
from .ports import CardRepository
from .sm2 import initialize_state, review

__all__ = [
    "ReviewState",
    "Flashcard",
    "CardRepository",
    "InvalidQualityError",
    "CardNotFoundError",
    "StaleCardStateError",
    "initialize_state",
    "review",
]

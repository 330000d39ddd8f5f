"""Errors raised by the scheduling domain and its repository port."""


class InvalidQualityError(ValueError):
    """Review grade is not an integer in 0..5."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"Review quality must be an integer in 0..5, got {quality!r}")


class CardNotFoundError(LookupError):
    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id}")


class StaleCardStateError(RuntimeError):
    """
    A state write was based on an outdated read of the card.

    Raised instead of overwriting, so two reviews computed from the same
    previous state never silently discard one another.
    """

    def __init__(self, card_id: str, expected_version: int, actual_version: int):
        self.card_id = card_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Card {card_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )

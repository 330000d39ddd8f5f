"""Stable identifiers for flashcards."""

from ulid import ULID


def generate_card_id() -> str:
    """Generate a sortable card ID using ULID."""
    return f"card_{ULID()}"

from dataclasses import FrozenInstanceError

import pytest

from flashdeck.domain.scheduling.models import Flashcard, ReviewState


def test_to_record_uses_stored_field_names():
    state = ReviewState(easiness=2.36, interval=15, repetition=3, due_at=42)
    assert state.to_record() == {
        "easiness": 2.36,
        "interval": 15,
        "repetition": 3,
        "dueAt": 42,
    }


def test_from_record_round_trip():
    state = ReviewState(easiness=1.8, interval=4, repetition=2, due_at=99)
    assert ReviewState.from_record(state.to_record(), now=0) == state


def test_from_record_fills_legacy_defaults():
    # Cards created before scheduling have only front/back
    state = ReviewState.from_record({"front": "hola", "back": "hello"}, now=5000)
    assert state == ReviewState(easiness=2.5, interval=0, repetition=0, due_at=5000)


def test_from_record_coerces_types():
    state = ReviewState.from_record(
        {"easiness": "2.4", "interval": 3.0, "repetition": "1", "dueAt": 7.0}, now=0
    )
    assert state == ReviewState(easiness=2.4, interval=3, repetition=1, due_at=7)


def test_review_state_is_frozen():
    state = ReviewState(easiness=2.5, interval=0, repetition=0, due_at=0)
    with pytest.raises(FrozenInstanceError):
        state.interval = 3


def test_flashcard_is_due():
    card = Flashcard(
        id="card_1",
        library_id="lib",
        front="f",
        back="b",
        state=ReviewState(easiness=2.5, interval=1, repetition=1, due_at=1000),
        created_at=0,
    )
    assert card.version == 0
    assert card.is_due(1000)
    assert card.is_due(1001)
    assert not card.is_due(999)


def test_from_record_treats_null_as_missing():
    record = {"easiness": None, "interval": None, "repetition": None, "dueAt": None}
    assert ReviewState.from_record(record, now=5) == ReviewState(
        easiness=2.5, interval=0, repetition=0, due_at=5
    )


def test_from_record_keeps_zero_values():
    record = {"easiness": 1.3, "interval": 0, "repetition": 0, "dueAt": 0}
    assert ReviewState.from_record(record, now=99).due_at == 0

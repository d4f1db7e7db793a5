"""Tests for the progress tracker."""
from typing import List

import pytest
from faker import Faker

from vocamarathon.exceptions import MissingCurrentItemError
from vocamarathon.models.drill_models import ItemStatus, WordItem
from vocamarathon.services.progress_tracker import ProgressTracker

fake = Faker()


@pytest.fixture
def pool() -> List[WordItem]:
    """Create a small pool of words."""
    return [
        WordItem(id=f"w{i}", source_text=fake.unique.word(), target_text=fake.word())
        for i in range(4)
    ]


@pytest.fixture
def tracker(pool: List[WordItem]) -> ProgressTracker:
    """Create an initialized tracker."""
    tracker = ProgressTracker()
    tracker.initialize(pool)
    return tracker


def test_initialize(tracker: ProgressTracker, pool: List[WordItem]) -> None:
    """Test that every word starts unseen, without attempts or slot."""
    assert list(tracker.entries) == [item.id for item in pool]
    for entry in tracker.entries.values():
        assert entry.status is ItemStatus.UNSEEN
        assert entry.attempts == 0
        assert entry.slot is None
    assert not tracker.all_mastered()


def test_record_answer(tracker: ProgressTracker) -> None:
    """Test status transitions and attempt counting."""
    entry = tracker.record_answer("w0", ItemStatus.MISTAKE)
    assert entry.status is ItemStatus.MISTAKE
    assert entry.attempts == 1

    entry = tracker.record_answer("w0", ItemStatus.UNKNOWN)
    assert entry.status is ItemStatus.UNKNOWN
    assert entry.attempts == 2

    entry = tracker.record_answer("w0", ItemStatus.CORRECT)
    assert entry.status is ItemStatus.CORRECT
    assert entry.attempts == 3


def test_record_answer_rejects_unseen(tracker: ProgressTracker) -> None:
    """Test that an answer cannot reset a word to unseen."""
    with pytest.raises(ValueError):
        tracker.record_answer("w0", ItemStatus.UNSEEN)
    assert tracker.get("w0").attempts == 0


def test_unknown_word(tracker: ProgressTracker) -> None:
    """Test that unknown ids are reported."""
    with pytest.raises(MissingCurrentItemError):
        tracker.record_answer("nope", ItemStatus.CORRECT)
    with pytest.raises(MissingCurrentItemError):
        tracker.assign_slot_if_unset("nope")


def test_slots_follow_first_presentation(tracker: ProgressTracker) -> None:
    """Test that slots are sequential in first-seen order and never change."""
    assert tracker.assign_slot_if_unset("w2") == 0
    assert tracker.assign_slot_if_unset("w0") == 1
    assert tracker.assign_slot_if_unset("w2") == 0
    assert tracker.assign_slot_if_unset("w3") == 2
    assert tracker.assign_slot_if_unset("w0") == 1

    assert [entry.word_id for entry in tracker.slot_order()] == ["w2", "w0", "w3"]


def test_slot_counter_is_per_tracker(pool: List[WordItem]) -> None:
    """Test that two trackers do not share slot numbering."""
    first = ProgressTracker()
    second = ProgressTracker()
    first.initialize(pool)
    second.initialize(pool)

    first.assign_slot_if_unset("w1")
    assert second.assign_slot_if_unset("w3") == 0


def test_all_mastered_and_count(tracker: ProgressTracker, pool: List[WordItem]) -> None:
    """Test mastery detection."""
    for item in pool:
        tracker.record_answer(item.id, ItemStatus.CORRECT)
    assert tracker.all_mastered()
    assert tracker.count(ItemStatus.CORRECT) == len(pool)
    assert tracker.count() == len(pool)

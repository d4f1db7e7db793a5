"""Per-word progress within a marathon session."""
import logging
from typing import Dict, Iterable, List, Optional

from vocamarathon.exceptions import MissingCurrentItemError
from vocamarathon.models.drill_models import ItemStatus, ProgressEntry, WordItem

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Tracks status, attempts and display slot of every word in a pool.

    Slots are handed out from a counter owned by the tracker, in the order
    words are first presented, so the progress indicator fills left to right
    even though words are revisited out of order.
    """

    def __init__(self):
        self.entries: Dict[str, ProgressEntry] = {}
        self._next_slot = 0

    def initialize(self, pool: Iterable[WordItem]) -> Dict[str, ProgressEntry]:
        """Reset progress to UNSEEN for every word, keeping pool order."""
        self.entries = {item.id: ProgressEntry(word_id=item.id) for item in pool}
        self._next_slot = 0
        logger.debug(f"Initialized progress for {len(self.entries)} words")
        return self.entries

    def get(self, word_id: str) -> ProgressEntry:
        entry = self.entries.get(word_id)
        if entry is None:
            raise MissingCurrentItemError(word_id)
        return entry

    def record_answer(self, word_id: str, outcome: ItemStatus) -> ProgressEntry:
        """Store the outcome of one submission (answer or skip)."""
        if outcome is ItemStatus.UNSEEN:
            raise ValueError("An answer cannot leave a word unseen")
        entry = self.get(word_id)
        entry.status = outcome
        entry.attempts += 1
        logger.debug(f"Word {word_id}: {outcome.value} after {entry.attempts} attempts")
        return entry

    def assign_slot_if_unset(self, word_id: str) -> int:
        """Give the word the next free slot unless it already has one."""
        entry = self.get(word_id)
        if entry.slot is None:
            entry.slot = self._next_slot
            self._next_slot += 1
        return entry.slot

    def all_mastered(self) -> bool:
        return all(entry.status is ItemStatus.CORRECT for entry in self.entries.values())

    def slot_order(self) -> List[ProgressEntry]:
        """Entries that have a slot, ordered by slot."""
        placed = [entry for entry in self.entries.values() if entry.slot is not None]
        return sorted(placed, key=lambda entry: entry.slot)

    def count(self, status: Optional[ItemStatus] = None) -> int:
        if status is None:
            return len(self.entries)
        return sum(1 for entry in self.entries.values() if entry.status is status)

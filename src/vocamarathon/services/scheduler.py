"""Selection of the next word to present in a marathon session."""
import logging
import random
from dataclasses import dataclass
from typing import List, Mapping, Optional, Protocol, Tuple

from vocamarathon.config import settings
from vocamarathon.models.drill_models import ItemStatus, ProgressEntry

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class SelectionWeights:
    """Tunables of the weighted pass."""
    mistake: float = settings.drill.mistake_weight
    correct: float = settings.drill.correct_weight
    repeat_penalty: float = settings.drill.repeat_penalty
    mastery_cap: int = settings.drill.mastery_cap


def _weight(entry: ProgressEntry, weights: SelectionWeights) -> float:
    if entry.status is ItemStatus.CORRECT:
        return weights.correct
    return weights.mistake


def _weighted_choice(candidates: List[Tuple[str, float]], rng: RandomSource) -> Optional[str]:
    total = sum(weight for _, weight in candidates)
    if not candidates or total <= 0:
        return None
    point = rng.random() * total
    cumulative = 0.0
    for word_id, weight in candidates:
        cumulative += weight
        if point < cumulative:
            return word_id
    # Floating point leftovers land on the last candidate
    return candidates[-1][0]


def select_next(
    entries: Mapping[str, ProgressEntry],
    previous_id: Optional[str] = None,
    rng: Optional[RandomSource] = None,
    weights: Optional[SelectionWeights] = None,
) -> Optional[str]:
    """Pick the id of the next word to present, or None when the session is over.

    ``entries`` must iterate in pool order. Unseen words are presented first,
    in that order. Once everything has been seen, words whose last answer
    was wrong or skipped are drawn far more often than mastered ones, mastered
    words with ``mastery_cap`` attempts are retired and the previous word is
    avoided whenever anything else is left.
    """
    rng = rng if rng is not None else random
    weights = weights if weights is not None else SelectionWeights()

    if all(entry.status is ItemStatus.CORRECT for entry in entries.values()):
        return None

    for word_id, entry in entries.items():
        if entry.status is ItemStatus.UNSEEN:
            logger.debug(f"Presenting unseen word {word_id}")
            return word_id

    candidates = [
        entry for entry in entries.values()
        if not (entry.status is ItemStatus.CORRECT and entry.attempts >= weights.mastery_cap)
    ]

    weighted = []
    for entry in candidates:
        weight = _weight(entry, weights)
        if entry.word_id == previous_id and len(candidates) > 1:
            weight *= weights.repeat_penalty
        weighted.append((entry.word_id, weight))

    others = [(word_id, weight) for word_id, weight in weighted if word_id != previous_id]
    if others:
        weighted = others

    selected = _weighted_choice(weighted, rng)
    if selected is None:
        logger.warning("No candidate left although not every word is mastered")
    else:
        logger.debug(f"Selected {selected} from {len(weighted)} candidates")
    return selected

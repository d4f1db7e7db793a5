"""Models for the marathon drill: items, progress, session states."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from vocamarathon.config import settings


class ItemStatus(Enum):
    """Mastery state of a single word within a session."""
    UNSEEN = "unseen"  # Not presented yet
    CORRECT = "correct"  # Last answer accepted
    MISTAKE = "mistake"  # Last answer rejected
    UNKNOWN = "unknown"  # Last presentation was skipped


class MatchResult(Enum):
    """Outcome of comparing a typed answer with the accepted variants."""
    REJECTED = "rejected"
    ACCEPTED_EXACT = "accepted_exact"
    ACCEPTED_TYPO = "accepted_typo"

    @property
    def accepted(self) -> bool:
        return self is not MatchResult.REJECTED


class Direction(Enum):
    """Which side of a word is shown and which one has to be typed."""
    SOURCE_TO_TARGET = "source-target"  # Show source text, type the target text
    TARGET_TO_SOURCE = "target-source"  # Show target text, type the source text


@dataclass(frozen=True)
class WordItem:
    """Read-only view of a vocabulary entry handed to a session."""
    id: str
    source_text: str
    target_text: str
    unit: str = ""
    section: str = ""

    def prompt_text(self, direction: Direction) -> str:
        """Text shown to the user."""
        return self.source_text if direction is Direction.SOURCE_TO_TARGET else self.target_text

    def answer_text(self, direction: Direction) -> str:
        """Text the user is expected to type."""
        return self.target_text if direction is Direction.SOURCE_TO_TARGET else self.source_text


@dataclass
class ProgressEntry:
    """Per-word progress within one session."""
    word_id: str
    status: ItemStatus = ItemStatus.UNSEEN
    attempts: int = 0
    slot: Optional[int] = None


@dataclass(frozen=True)
class PoolFilter:
    """Restricts which words are fetched for a session."""
    unit: Optional[str] = None
    section: Optional[str] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class DrillOptions:
    """Per-session configuration."""
    pool_filter: PoolFilter = field(default_factory=PoolFilter)
    direction: Direction = Direction(settings.drill.default_direction)
    shuffle: bool = settings.drill.shuffle
    prioritize_mistakes: bool = False
    size: int = settings.drill.default_pool_size


@dataclass(frozen=True)
class SessionSummary:
    """Emitted once when every word in the pool is mastered."""
    items_count: int
    total_attempts: int
    mistake_ids: List[str]

    def to_record(self) -> dict:
        """History record shape."""
        return {
            "type": "marathon",
            "score": self.items_count,
            "total": self.total_attempts,
            "mistakes": list(self.mistake_ids),
        }


@dataclass(frozen=True)
class Feedback:
    """Result of a submission, shown before moving on."""
    word_id: str
    outcome: ItemStatus
    match: Optional[MatchResult]  # None for a skip
    expected: str  # answer text cleaned for display
    attempts: int

    @property
    def is_typo(self) -> bool:
        return self.match is MatchResult.ACCEPTED_TYPO


# Session controller states

@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Presenting:
    word_id: str


@dataclass(frozen=True)
class AwaitingAnswer:
    word_id: str


@dataclass(frozen=True)
class ShowingFeedback:
    word_id: str
    outcome: ItemStatus
    match: Optional[MatchResult]


@dataclass(frozen=True)
class Completed:
    summary: SessionSummary


@dataclass(frozen=True)
class Abandoned:
    pass


@dataclass(frozen=True)
class Failed:
    word_id: str  # id the session could not resolve


SessionState = Union[Loading, Presenting, AwaitingAnswer, ShowingFeedback, Completed, Abandoned, Failed]

"""Marathon drill session: present, check, update, reselect until mastery."""
import logging
from typing import Dict, List, Optional

from vocamarathon import monitoring
from vocamarathon.exceptions import EmptyPoolError, InvalidTransitionError, MissingCurrentItemError
from vocamarathon.models.drill_models import (
    Abandoned,
    AwaitingAnswer,
    Completed,
    DrillOptions,
    Failed,
    Feedback,
    ItemStatus,
    Loading,
    MatchResult,
    Presenting,
    ProgressEntry,
    SessionState,
    SessionSummary,
    ShowingFeedback,
    WordItem,
)
from vocamarathon.services.progress_tracker import ProgressTracker
from vocamarathon.services.scheduler import RandomSource, SelectionWeights, select_next
from vocamarathon.services.text_matching import check_answer, clean_for_display

logger = logging.getLogger(__name__)


class MarathonSession:
    """One marathon drill over a pool of words.

    The session ends only when the last answer for every word was correct.
    Answers are classified and recorded before the next word is selected;
    there is no look-ahead. A session that is abandoned leaves no history.

    ``pool_provider`` needs a ``fetch_pool(pool_filter, shuffle,
    prioritize_mistakes, size)`` method and ``history_sink`` a
    ``record_session(summary)`` method (see ``WordService`` and
    ``HistoryService``).
    """

    def __init__(
        self,
        pool_provider,
        history_sink=None,
        options: Optional[DrillOptions] = None,
        rng: Optional[RandomSource] = None,
        weights: Optional[SelectionWeights] = None,
    ):
        self.pool_provider = pool_provider
        self.history_sink = history_sink
        self.options = options or DrillOptions()
        self.rng = rng
        self.weights = weights or SelectionWeights()

        self.state: SessionState = Loading()
        self.pool: List[WordItem] = []
        self.items: Dict[str, WordItem] = {}
        self.tracker = ProgressTracker()
        self.total_attempts = 0
        self.mistake_ids: Dict[str, None] = {}  # insertion-ordered set
        self.previous_word_id: Optional[str] = None

    # State helpers

    def _require(self, operation: str, *states: type) -> None:
        if not isinstance(self.state, states):
            raise InvalidTransitionError(operation, self.state)

    def _item(self, word_id: str) -> WordItem:
        item = self.items.get(word_id)
        if item is None:
            logger.error(f"Scheduler selected {word_id!r} which is not in the pool of {len(self.items)} words")
            self.state = Failed(word_id)
            raise MissingCurrentItemError(word_id)
        return item

    def _present(self, word_id: str) -> WordItem:
        item = self._item(word_id)
        self.state = Presenting(word_id)
        slot = self.tracker.assign_slot_if_unset(word_id)
        logger.debug(f"Presenting {word_id} in slot {slot}")
        self.state = AwaitingAnswer(word_id)
        return item

    # Transitions

    def start(self) -> WordItem:
        """Fetch the pool and present the first word."""
        self._require("start", Loading)
        self.pool = list(self.pool_provider.fetch_pool(
            self.options.pool_filter,
            shuffle=self.options.shuffle,
            prioritize_mistakes=self.options.prioritize_mistakes,
            size=self.options.size,
        ))
        if not self.pool:
            monitoring.empty_pools.inc()
            logger.info(f"No words for {self.options.pool_filter}, not starting a session")
            raise EmptyPoolError(f"No words match {self.options.pool_filter}")

        self.items = {item.id: item for item in self.pool}
        self.tracker.initialize(self.pool)
        monitoring.sessions_started.inc()
        logger.info(f"Started marathon over {len(self.pool)} words ({self.options.direction.value})")

        first_id = select_next(self.tracker.entries, None, self.rng, self.weights)
        return self._present(first_id)

    def submit(self, answer: str) -> Feedback:
        """Check a typed answer for the current word."""
        self._require("submit", AwaitingAnswer)
        item = self._item(self.state.word_id)
        match = check_answer(answer, item.answer_text(self.options.direction))
        outcome = ItemStatus.CORRECT if match.accepted else ItemStatus.MISTAKE
        if match is MatchResult.ACCEPTED_TYPO:
            monitoring.typo_acceptances.inc()
        return self._record(item, outcome, match)

    def skip(self) -> Feedback:
        """Give up on the current word for now."""
        self._require("skip", AwaitingAnswer)
        item = self._item(self.state.word_id)
        return self._record(item, ItemStatus.UNKNOWN, None)

    def _record(self, item: WordItem, outcome: ItemStatus, match: Optional[MatchResult]) -> Feedback:
        entry = self.tracker.record_answer(item.id, outcome)
        self.total_attempts += 1
        if outcome is not ItemStatus.CORRECT:
            self.mistake_ids[item.id] = None
        monitoring.answers.labels(outcome=outcome.value).inc()

        self.state = ShowingFeedback(item.id, outcome, match)
        return Feedback(
            word_id=item.id,
            outcome=outcome,
            match=match,
            expected=clean_for_display(item.answer_text(self.options.direction)),
            attempts=entry.attempts,
        )

    def advance(self) -> Optional[WordItem]:
        """Move on from feedback; returns None once the session is complete."""
        self._require("advance", ShowingFeedback)
        self.previous_word_id = self.state.word_id

        next_id = select_next(self.tracker.entries, self.previous_word_id, self.rng, self.weights)
        if next_id is None:
            self._complete()
            return None
        return self._present(next_id)

    def abandon(self) -> None:
        """Leave the session; nothing is written to history."""
        if isinstance(self.state, (Completed, Abandoned, Failed)):
            return
        logger.info(f"Marathon abandoned after {self.total_attempts} attempts")
        monitoring.sessions_abandoned.inc()
        self.state = Abandoned()

    def _complete(self) -> None:
        summary = SessionSummary(
            items_count=len(self.pool),
            total_attempts=self.total_attempts,
            mistake_ids=list(self.mistake_ids),
        )
        self.state = Completed(summary)
        monitoring.sessions_completed.inc()
        monitoring.session_attempts.observe(summary.total_attempts)
        logger.info(f"Marathon completed: {summary.items_count} words, {summary.total_attempts} attempts, {len(summary.mistake_ids)} mistakes")

        if self.history_sink is None:
            return
        try:
            self.history_sink.record_session(summary)
        except Exception as e:
            monitoring.history_write_errors.inc()
            logger.error(f"Error saving marathon history: {e}")

    # Read helpers

    @property
    def current_item(self) -> Optional[WordItem]:
        word_id = getattr(self.state, "word_id", None)
        return self.items.get(word_id) if word_id is not None else None

    @property
    def prompt(self) -> Optional[str]:
        item = self.current_item
        if item is None:
            return None
        return clean_for_display(item.prompt_text(self.options.direction))

    @property
    def expected_answer(self) -> Optional[str]:
        item = self.current_item
        if item is None:
            return None
        return clean_for_display(item.answer_text(self.options.direction))

    @property
    def is_completed(self) -> bool:
        return isinstance(self.state, Completed)

    @property
    def summary(self) -> Optional[SessionSummary]:
        return self.state.summary if isinstance(self.state, Completed) else None

    def progress_slots(self) -> List[ProgressEntry]:
        """Entries in slot order, for the progress indicator."""
        return self.tracker.slot_order()

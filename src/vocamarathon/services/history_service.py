"""Service for storing and reading drill results."""
import logging
from typing import List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vocamarathon.exceptions import PersistenceError
from vocamarathon.models.drill_models import SessionSummary
from vocamarathon.models.models import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryService:
    """Service for storing and reading drill results."""

    def __init__(self, db: Session, device_id: Optional[str] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.device_id = device_id

    def save_result(
        self,
        result_type: str,
        score: int,
        total: int,
        mistakes: List[str],
        device_id: Optional[str] = None,
    ) -> HistoryEntry:
        """Append one result to the history."""
        entry = HistoryEntry(
            type=result_type,
            score=score,
            total=total,
            mistakes=list(mistakes),
            device_id=device_id or self.device_id,
        )
        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Could not save {result_type} result: {e}") from e

        logger.info(f"Saved {result_type} result {entry.id}: score {score}, total {total}, {len(entry.mistakes)} mistakes")
        return entry

    def record_session(self, summary: SessionSummary) -> HistoryEntry:
        """Store the summary of a completed marathon session."""
        record = summary.to_record()
        return self.save_result(
            record["type"],
            score=record["score"],
            total=record["total"],
            mistakes=record["mistakes"],
        )

    def get_history(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """Get results, newest first."""
        query = self.db.query(HistoryEntry).order_by(HistoryEntry.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_mistake_ids(self) -> Set[str]:
        """Ids of every word ever recorded as a mistake."""
        mistake_ids = set()
        for (mistakes,) in self.db.query(HistoryEntry.mistakes).all():
            if isinstance(mistakes, list):
                mistake_ids.update(str(word_id) for word_id in mistakes)
        return mistake_ids

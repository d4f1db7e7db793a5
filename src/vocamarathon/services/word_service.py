"""Service for managing vocabulary and building drill pools."""
import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from vocamarathon.config import settings
from vocamarathon.models.drill_models import PoolFilter, WordItem
from vocamarathon.models.models import Word
from vocamarathon.services.history_service import HistoryService

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class WordService:
    """Service for managing vocabulary and building drill pools."""

    def __init__(self, db: Session, history_service: Optional[HistoryService] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.history_service = history_service or HistoryService(db)

    def get_word(self, word_id: str) -> Optional[Word]:
        """Get a word by its ID."""
        return self.db.get(Word, word_id)

    def get_word_count(self, language: Optional[str] = None) -> int:
        """Get the count of words in the database."""
        query = self.db.query(Word)
        if language:
            query = query.filter(Word.language == language)
        return query.count()

    def import_words(self, records: Iterable[Dict[str, Any]], language: str = "en") -> int:
        """Insert or update vocabulary records.

        Records use the keys ``id``, ``word``, ``translation``, ``pos``,
        ``pronunciation``, ``example``, ``unit`` and ``section``. Records with a
        blank word or translation are skipped.
        """
        position = self.db.query(func.coalesce(func.max(Word.position), -1)).scalar() + 1
        imported = 0
        pending: Dict[str, Word] = {}
        for record in records:
            if _is_blank(record.get("word")) or _is_blank(record.get("translation")):
                logger.debug(f"Skipping incomplete record: {record}")
                continue

            word_id = record.get("id")
            word = None
            if word_id is not None:
                word = pending.get(str(word_id)) or self.get_word(str(word_id))
            if word is None:
                word = Word(position=position)
                if word_id is not None:
                    word.id = str(word_id)
                    pending[word.id] = word
                position += 1
                self.db.add(word)

            word.text = record["word"]
            word.translation = record["translation"]
            word.pos = record.get("pos")
            word.pronunciation = record.get("pronunciation")
            word.example = record.get("example")
            word.unit = str(record.get("unit") or "")
            word.section = str(record.get("section") or "")
            word.language = language
            imported += 1

        self.db.commit()
        logger.info(f"Imported {imported} words for language {language}")
        return imported

    def import_json(self, path: Union[str, Path], language: str = "en") -> int:
        """Import a JSON list of vocabulary records."""
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list):
            raise ValueError(f"{path} must contain a list of word records")
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValueError(f"{path}: record {index} is not an object")
        return self.import_words(records, language=language)

    def get_languages(self) -> List[str]:
        """Get all languages that have words."""
        rows = self.db.query(Word.language).distinct().order_by(Word.language).all()
        return [language for (language,) in rows]

    def get_structure(self, language: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get units and their sections in document order."""
        query = self.db.query(Word.unit, Word.section).order_by(Word.position)
        if language:
            query = query.filter(Word.language == language)

        structure: Dict[str, List[str]] = {}
        for unit, section in query.all():
            sections = structure.setdefault(unit, [])
            if section and section not in sections:
                sections.append(section)
        return [{"unit": unit, "sections": sections} for unit, sections in structure.items()]

    def fetch_pool(
        self,
        pool_filter: Optional[PoolFilter] = None,
        shuffle: bool = True,
        prioritize_mistakes: bool = False,
        size: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> List[WordItem]:
        """Get the ordered words for a drill session.

        With ``prioritize_mistakes`` the words recorded as mistakes in earlier
        sessions come first; each group is shuffled on its own.
        """
        pool_filter = pool_filter or PoolFilter()
        size = size if size is not None else settings.drill.default_pool_size
        if size < 0:
            raise ValueError("Pool size cannot be negative")
        rng = rng if rng is not None else random

        query = self.db.query(Word)
        if pool_filter.unit:
            query = query.filter(Word.unit == pool_filter.unit)
        if pool_filter.section:
            query = query.filter(Word.section == pool_filter.section)
        if pool_filter.language:
            query = query.filter(Word.language == pool_filter.language)

        words = [
            word for word in query.order_by(Word.position).all()
            if not _is_blank(word.text) and not _is_blank(word.translation)
        ]

        if prioritize_mistakes:
            mistake_ids = self.history_service.get_mistake_ids()
            groups = [
                [word for word in words if word.id in mistake_ids],
                [word for word in words if word.id not in mistake_ids],
            ]
            logger.debug(f"{len(groups[0])} of {len(words)} words were mistakes before")
        else:
            groups = [words]

        if shuffle:
            for group in groups:
                rng.shuffle(group)

        ordered = [word for group in groups for word in group][:size]
        logger.info(f"Fetched pool of {len(ordered)} words for {pool_filter}")
        return [
            WordItem(
                id=word.id,
                source_text=word.text,
                target_text=word.translation,
                unit=word.unit,
                section=word.section,
            )
            for word in ordered
        ]

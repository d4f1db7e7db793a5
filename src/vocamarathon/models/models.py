"""Database models for the vocabulary store and session history."""
import uuid

from sqlalchemy import JSON, Column, Integer, String

from vocamarathon.models.base import Base, TimestampMixin


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


class Word(Base, TimestampMixin):
    """Vocabulary entry."""

    __tablename__ = "words"

    id = Column(String, primary_key=True, default=_new_id)
    text = Column(String, nullable=False)  # source language, may carry markup
    translation = Column(String, nullable=False)  # target language
    pos = Column(String, nullable=True)
    pronunciation = Column(String, nullable=True)
    example = Column(String, nullable=True)
    unit = Column(String, nullable=False, default="", index=True)
    section = Column(String, nullable=False, default="", index=True)
    language = Column(String, nullable=False, default="en", index=True)
    position = Column(Integer, nullable=False, default=0)  # order within the imported document

    def __repr__(self) -> str:
        return f"<Word {self.id} {self.text!r}>"


class HistoryEntry(Base, TimestampMixin):
    """Result of one finished drill or test."""

    __tablename__ = "history"

    id = Column(String, primary_key=True, default=_new_id)
    type = Column(String, nullable=False)  # e.g. "marathon"
    score = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)
    mistakes = Column(JSON, nullable=False, default=list)  # list of word ids
    device_id = Column(String, nullable=True)

    def __repr__(self) -> str:
        return f"<HistoryEntry {self.id} {self.type} {self.score}/{self.total}>"

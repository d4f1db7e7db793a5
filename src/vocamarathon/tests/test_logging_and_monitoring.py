"""Tests for logging setup and session metrics."""
import logging
import random

from prometheus_client import REGISTRY

from vocamarathon.logging_config import setup_logging
from vocamarathon.models.drill_models import WordItem
from vocamarathon.services.marathon_service import MarathonSession


class OneWordProvider:
    def fetch_pool(self, pool_filter, shuffle, prioritize_mistakes, size):
        return [WordItem(id="w1", source_text="house", target_text="dům")]


def sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_setup_logging_replaces_handlers():
    """Test that repeated setup leaves a single console handler."""
    setup_logging(level="DEBUG")
    setup_logging("hello", level="WARNING")

    root_logger = logging.getLogger()
    assert root_logger.level == logging.WARNING
    assert len(root_logger.handlers) == 1
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_session_metrics():
    """Test that a finished session updates the counters."""
    started = sample("vocamarathon_sessions_started_total")
    completed = sample("vocamarathon_sessions_completed_total")
    mistakes = sample("vocamarathon_answers_total", outcome="mistake")
    correct = sample("vocamarathon_answers_total", outcome="correct")
    typos = sample("vocamarathon_typo_acceptances_total")

    session = MarathonSession(OneWordProvider(), rng=random.Random(0))
    session.start()
    session.submit("car")
    session.advance()
    session.submit("hause")
    session.advance()

    assert sample("vocamarathon_sessions_started_total") == started + 1
    assert sample("vocamarathon_sessions_completed_total") == completed + 1
    assert sample("vocamarathon_answers_total", outcome="mistake") == mistakes + 1
    assert sample("vocamarathon_answers_total", outcome="correct") == correct + 1
    assert sample("vocamarathon_typo_acceptances_total") == typos + 1

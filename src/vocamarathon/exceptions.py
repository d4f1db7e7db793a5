"""Errors raised by the drill core and its collaborators."""


class MarathonError(Exception):
    """Base class for drill errors."""


class EmptyPoolError(MarathonError):
    """The pool provider returned no items, so no session can start."""


class MissingCurrentItemError(MarathonError):
    """A selected or referenced word id is not part of the session pool."""

    def __init__(self, word_id: str):
        super().__init__(f"Word {word_id!r} is not part of the session pool")
        self.word_id = word_id


class InvalidTransitionError(MarathonError):
    """An operation was requested in a session state that does not allow it."""

    def __init__(self, operation: str, state: object):
        super().__init__(f"Cannot {operation} while session is {type(state).__name__}")
        self.operation = operation
        self.state = state


class PersistenceError(MarathonError):
    """Writing to the history store failed."""

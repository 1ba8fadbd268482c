"""Exceptions raised by the learning style engine."""
from __future__ import annotations


class LearningStyleError(Exception):
    """Base class for learning style engine errors."""


class MalformedObservationError(LearningStyleError, ValueError):
    """A behavioral observation violates the producer contract (e.g. unknown modality)."""


class RepositoryError(LearningStyleError):
    """The durable profile store could not be read or written."""

    def __init__(self, message: str, user_id: str | None = None):
        super().__init__(message)
        self.user_id = user_id

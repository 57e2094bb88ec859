"""Domain errors raised by the brain dump services."""
from __future__ import annotations

from uuid import UUID


class BrainDumpError(Exception):
    """Base class for brain dump domain errors."""


class AuthenticationRequired(BrainDumpError):
    """The operation needs a caller identity and none was supplied."""

    def __init__(self, message: str = "Must be logged in to create a brain dump") -> None:
        super().__init__(message)


class BrainDumpNotFound(BrainDumpError):
    """The record a background task targets no longer exists."""

    def __init__(self, brain_dump_id: UUID | str) -> None:
        super().__init__(f"Brain dump {brain_dump_id} not found")
        self.brain_dump_id = brain_dump_id


class AnalysisFailure(BrainDumpError):
    """The language model call or its response could not produce an analysis."""

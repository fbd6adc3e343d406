"""Domain errors raised by the match results services.

Each error carries a stable ``kind`` and the HTTP status the API maps it to.
Storage failures are not wrapped; they propagate as SQLAlchemy errors and are
reported as internal failures.
"""

from __future__ import annotations


class MatchResultError(Exception):
    """Base class for user-correctable match result failures."""

    kind = "error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(MatchResultError):
    kind = "not_found"
    status_code = 404

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity


class ForbiddenError(MatchResultError):
    kind = "forbidden"
    status_code = 403


class DuplicateSubmissionError(MatchResultError):
    """The team already has a submission for this match."""

    kind = "conflict"
    status_code = 409

    def __init__(
        self,
        message: str = "Team has already submitted a result for this match",
    ) -> None:
        super().__init__(message)


class InvalidStateError(MatchResultError):
    """The match is in a state that does not accept the operation."""

    kind = "invalid_state"
    status_code = 400

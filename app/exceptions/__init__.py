"""Custom exceptions for the ako-odds service."""

from typing import Any


class OddsServiceError(Exception):
    """Base exception for all odds service errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "ODDS_SERVICE_ERROR"
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dict for API response."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(OddsServiceError):
    """Requested match or bookmaker is absent from the store."""


class MatchNotFoundError(NotFoundError):
    """One or more requested matches are not stored.

    The message only says whether the request had one leg or several; it
    does not name the missing ID.
    """

    def __init__(self, *, multiple: bool = False):
        if multiple:
            message = "One of the matches with given Id not found"
        else:
            message = "Match with given Id not found"
        super().__init__(message, code="MATCH_NOT_FOUND")


class BookmakerNotFoundError(NotFoundError):
    """Match is stored but has no odds from the requested bookmaker."""

    def __init__(self, bookmaker: str, match_id: str):
        super().__init__(
            f"Bookmaker {bookmaker} not found for match {match_id}",
            code="BOOKMAKER_NOT_FOUND",
            details={"bookmaker": bookmaker, "match_id": match_id},
        )
        self.bookmaker = bookmaker
        self.match_id = match_id


class ValidationError(OddsServiceError):
    """Invalid input data."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]  # Truncate

        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidEventTypeError(OddsServiceError):
    """Event type outside home/draw/guest reached the resolver."""

    def __init__(self, event_type: Any, match_id: str | None = None):
        details = {"event_type": str(event_type)[:100]}
        if match_id is not None:
            details["match_id"] = match_id
        super().__init__("Invalid event type", code="INVALID_EVENT_TYPE", details=details)
        self.event_type = event_type


class ResolutionError(OddsServiceError):
    """Fetched match has no corresponding leg in the request."""

    def __init__(self, match_id: str):
        super().__init__(
            "Internal server error",
            code="RESOLUTION_ERROR",
            details={"match_id": match_id},
        )
        self.match_id = match_id


class FeedError(OddsServiceError):
    """Odds feed request failed (timeout, HTTP 4xx/5xx, bad payload)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ):
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        if url is not None:
            details["url"] = url

        super().__init__(message, code="FEED_ERROR", details=details)
        self.status_code = status_code


class DatabaseError(OddsServiceError):
    """Database operation failed."""

    def __init__(
        self,
        message: str = "Database operation failed",
        *,
        operation: str | None = None,
        table: str | None = None,
    ):
        details = {}
        if operation is not None:
            details["operation"] = operation
        if table is not None:
            details["table"] = table

        super().__init__(message, code="DATABASE_ERROR", details=details)

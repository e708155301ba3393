# feedboard/core/errors.py
from __future__ import annotations


class TopicError(Exception):
    """Base class for topic registry failures."""

    status_code = 400


class InvalidKeyword(TopicError):
    pass


class Duplicate(TopicError):
    pass


class LimitReached(TopicError):
    pass


class NotFound(TopicError):
    status_code = 404


class FetchFailed(Exception):
    """
    An upstream feed could not be fetched.

    Raised on timeout, transport error or a non-2xx response. Never retried.
    """

    def __init__(self, source: str, message: str, status_code: int | None = None):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message
        self.status_code = status_code


class AggregationFailed(Exception):
    """Every source of an aggregated fetch failed."""

    def __init__(self, errors: dict[str, Exception]):
        self.errors = errors
        combined = "; ".join(f"{name}: {err}" for name, err in errors.items())
        super().__init__(f"All sources failed ({combined})")

"""Error taxonomy shared by the engines and the HTTP boundary.

InvalidArgument  -> 400  (missing required field, unsupported sort field, bad id)
NotFound         -> 404  (id does not resolve to a stored record)
StoreUnavailable -> 500  (database connection / driver failure, never retried)
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all failures raised by the tracker core."""

    code = "error"


class InvalidArgument(TrackerError):
    """Raised when a caller-supplied argument is missing or not allowed."""

    code = "invalid_argument"


class NotFound(TrackerError):
    """Raised when an identifier does not resolve to an existing record."""

    code = "not_found"

    def __init__(self, kind: str, ident: str) -> None:
        self.kind = kind
        self.ident = ident
        super().__init__(f"{kind} not found: {ident}")


class StoreUnavailable(TrackerError):
    """Raised when the underlying database cannot serve the request."""

    code = "store_unavailable"

"""
Error taxonomy for the pricing API and the key-authenticated routes.

Every error carries its HTTP status and renders its own JSON body; a
single exception handler in ``app.main`` turns them into responses.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

logger = logging.getLogger(__name__)

PRICING_QUERY_EXAMPLE = "?from=Nigeria&to=Ghana&weight=2&packageType=document"


class ShipQuoteError(Exception):
    """Base class for errors that map to exactly one HTTP response."""

    status_code: int = 500
    error: str = "Internal server error"
    # The missing-credential response is the only body without "success".
    include_success_flag: bool = True

    def __init__(self, error: str | None = None, **fields: Any):
        self.error = error or self.error
        self.fields = fields
        super().__init__(self.error)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.include_success_flag:
            body["success"] = False
        body["error"] = self.error
        body.update(self.fields)
        return body


class MissingParametersError(ShipQuoteError):
    """One or more of from / to / weight / packageType is absent."""

    status_code = 400
    error = "Missing required parameters: from, to, weight, packageType"

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(missing=self.missing, example=PRICING_QUERY_EXAMPLE)


class InvalidWeightError(ShipQuoteError):
    status_code = 400
    error = "Weight must be a positive number"


class MissingCredentialError(ShipQuoteError):
    """No ``Authorization: Bearer <key>`` header, or an empty key."""

    status_code = 401
    error = "Missing or invalid API key. Include as: Authorization: Bearer YOUR_API_KEY"
    include_success_flag = False


class InvalidCredentialError(ShipQuoteError):
    status_code = 401
    error = "Invalid API key. Please check your API key and try again."


class NoPricingRuleError(ShipQuoteError):
    """No rule stored for the exact (origin, destination, package type) triple."""

    status_code = 404
    error = "No pricing rules yet"

    def __init__(self, origin: str, destination: str, package_type: str):
        self.origin = origin
        self.destination = destination
        self.package_type = package_type
        super().__init__(
            message=(
                f"No pricing configuration found for route {origin} to {destination} "
                f"with package type {package_type}. "
                "Please contact support to set up pricing for this route."
            ),
        )


class InternalError(ShipQuoteError):
    status_code = 500
    error = "Internal server error. Please try again later."

    def __init__(self, message: str):
        super().__init__(message=message)


class InvalidRecordError(ValueError):
    """A stored row failed value-type validation."""


@contextmanager
def internal_errors(operation: str) -> Iterator[None]:
    """
    Let ``ShipQuoteError`` through and turn anything else raised in the
    block into ``InternalError`` (500), logging the traceback first.
    """
    try:
        yield
    except ShipQuoteError:
        raise
    except Exception as exc:
        logger.exception("%s failed", operation)
        raise InternalError(str(exc)) from exc

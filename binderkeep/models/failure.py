"""
Failure classification and response envelope.

Every failure that reaches an API caller is classified into a FailureKind
and rendered in the ApiResponse envelope. The service layer raises the
KnownError subclasses below; the exception handlers in main.py render them.

INVARIANT: No raw 500 errors may reach the caller. Unexpected exceptions are
rendered as unknown failures carrying only the exception type name.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION_FAILED = "validation_failed"

    # Catalog or identity provider unreachable / erroring
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Multi-step write rolled back part way
    PARTIAL_FAILURE = "partial_failure"

    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel):
    """
    Response envelope for failures.

    Successful endpoints return their own response models; failures are
    always wrapped in this envelope so callers can branch on failure.kind.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(
        cls,
        detail: str | None = None,
    ) -> "ApiResponse":
        """
        Create an unknown failure response.

        The message is fixed; only the detail varies.
        """
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="Something went wrong on our side. Please retry.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    kind: FailureKind = FailureKind.UNKNOWN
    status_code: int = 400
    suggestion: str | None = None

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.detail = detail
        if suggestion is not None:
            self.suggestion = suggestion
        super().__init__(message)

    def to_response(self) -> ApiResponse:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class UnauthorizedError(KnownError):
    """Missing, invalid or expired access token."""

    kind = FailureKind.UNAUTHORIZED
    status_code = 401
    suggestion = "Sign in again."


class NotFoundError(KnownError):
    """Referenced account, set or card does not exist for this caller."""

    kind = FailureKind.NOT_FOUND
    status_code = 404


class ConflictError(KnownError):
    """The resource already exists for this caller."""

    kind = FailureKind.CONFLICT
    status_code = 409


class InputValidationError(KnownError):
    """Missing or malformed required fields."""

    kind = FailureKind.VALIDATION_FAILED
    status_code = 422
    suggestion = "Check the request fields and try again."


class ServiceUnavailableError(KnownError):
    """An external collaborator is unreachable or erroring."""

    kind = FailureKind.SERVICE_UNAVAILABLE
    status_code = 503
    suggestion = "Please try again in a moment."


class PartialFailureError(KnownError):
    """
    A multi-step write failed part way and was rolled back.

    Nothing from the failed operation was persisted; the caller can retry.
    """

    kind = FailureKind.PARTIAL_FAILURE
    status_code = 500
    suggestion = "The change was not saved. Please retry."

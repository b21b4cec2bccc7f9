from binderkeep.models.catalog import CatalogCard, CatalogSet
from binderkeep.models.db import AccountDB, Base, TrackedSetDB, UserCardDB
from binderkeep.models.failure import (
    ApiResponse,
    ConflictError,
    FailureDetail,
    FailureKind,
    InputValidationError,
    KnownError,
    NotFoundError,
    OutcomeType,
    PartialFailureError,
    ServiceUnavailableError,
    UnauthorizedError,
)

__all__ = [
    "AccountDB",
    "ApiResponse",
    "Base",
    "CatalogCard",
    "CatalogSet",
    "ConflictError",
    "FailureDetail",
    "FailureKind",
    "InputValidationError",
    "KnownError",
    "NotFoundError",
    "OutcomeType",
    "PartialFailureError",
    "ServiceUnavailableError",
    "TrackedSetDB",
    "UnauthorizedError",
    "UserCardDB",
]

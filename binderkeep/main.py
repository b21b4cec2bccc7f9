import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from binderkeep.api import (
    auth_router,
    cards_router,
    catalog_router,
    health_router,
    sets_router,
)
from binderkeep.config import settings
from binderkeep.db.database import init_db
from binderkeep.models.failure import (
    ApiResponse,
    FailureKind,
    KnownError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("binderkeep"),
    lifespan=lifespan,
)

app.include_router(auth_router)
app.include_router(cards_router)
app.include_router(catalog_router)
app.include_router(health_router)
app.include_router(sets_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render classified failures in the response envelope."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed or unknown request fields as validation failures."""
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    response = ApiResponse.known_failure(
        kind=FailureKind.VALIDATION_FAILED,
        message="The request is missing fields or has malformed values.",
        detail="; ".join(problems),
        suggestion="Check the request fields and try again.",
    )
    return JSONResponse(
        status_code=422,
        content=response.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures; return only the exception type to the caller."""
    logger.exception("Unhandled error")
    response = ApiResponse.unknown_failure(detail=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=response.model_dump(mode="json"),
    )

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from investdash.core.db.session import create_tables
from investdash.core.logging import configure_logging, get_logger
from investdash.core.middleware.context import current_request_id
from investdash.core.middleware.request_id import RequestIdMiddleware
from investdash.domain.portfolio.routes.dashboard import router as dashboard_router
from investdash.domain.portfolio.routes.investments import router as investments_router
from investdash.domain.portfolio.routes.products import router as products_router
from investdash.domain.portfolio.routes.users import router as users_router
from investdash.shared.exceptions import (
    AppError,
    AuthorizationError,
    MissingReferenceError,
    RecordNotFound,
    StoreError,
    ValidationError,
)


logger = get_logger(__name__)

# Most specific first: RecordNotFound is also a StoreError.
_STATUS_BY_ERROR: list[tuple[type[AppError], int]] = [
    (ValidationError, 422),
    (MissingReferenceError, status.HTTP_409_CONFLICT),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (RecordNotFound, status.HTTP_404_NOT_FOUND),
    (StoreError, status.HTTP_502_BAD_GATEWAY),
]


def _status_for(exc: AppError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    code = _status_for(exc)
    logger.warning("request.app_error", path=request.url.path, error_type=type(exc).__name__, status_code=code)
    body: dict = {"detail": str(exc), "error": type(exc).__name__, "requestId": current_request_id()}
    if isinstance(exc, ValidationError):
        body["field"] = exc.field
    return JSONResponse(status_code=code, content=body)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    yield


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Investment Portfolio Dashboard - Backend", version="0.1.0", lifespan=lifespan)
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(AppError, app_error_handler)

    @app.get("/health", tags=["admin"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(users_router)
    app.include_router(products_router)
    app.include_router(investments_router)
    app.include_router(dashboard_router)

    return app


app = create_app()

"""
ZinaSite local gateway.

FastAPI application serving the REST contract the data access layer falls
back to in server-backed deployments:

    GET    /api/{resource}?status=
    GET    /api/admin/{resource}
    POST   /api/{resource}
    PUT    /api/{resource}/{id}
    DELETE /api/{resource}/{id}

Bodies use the same camelCase shape as the facades.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from zinasite.api.deps import Store, get_request_id, get_store
from zinasite.api.middleware.request_id import RequestIdMiddleware
from zinasite.api.v1 import router as api_router
from zinasite.config import get_settings
from zinasite.data.errors import DataAccessError
from zinasite.data.mapping import RESOURCES
from zinasite.logging_config import configure_logging, get_logger
from zinasite.schemas.common import ErrorResponse, HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Configure logging and open the store on startup."""
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )
    store = get_store()
    logger.info(
        "Starting %s v%s", settings.project_name, settings.version,
        extra={"store": store.name, "port": settings.port},
    )

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=f"{settings.project_name} gateway",
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
)

_cors_origins = [
    f"http://localhost:{settings.port}",
    f"http://127.0.0.1:{settings.port}",
]

app.add_middleware(RequestIdMiddleware)
# CORS last = outermost, so error responses carry the headers too
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(request: Request, status_code: int, detail: str, code: str) -> JSONResponse:
    req_id = get_request_id(request)
    body = ErrorResponse(detail=detail, code=code, request_id=req_id)
    headers = {"X-Request-ID": req_id} if req_id else None
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _resource_label(request: Request) -> str:
    for segment in request.url.path.split("/"):
        if segment in RESOURCES:
            return RESOURCES[segment].label.lower()
    return "request"


@app.exception_handler(DataAccessError)
async def data_access_exception_handler(request: Request, exc: DataAccessError):
    """Typed data-layer conditions keep their status code and message."""
    return _error(request, exc.status_code, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid payloads are a plain 400, like every other rejected input."""
    logger.info("Rejected payload", extra={"path": request.url.path, "errors": len(exc.errors())})
    return _error(
        request,
        status.HTTP_400_BAD_REQUEST,
        f"Invalid {_resource_label(request)} payload.",
        "validation_failed",
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    detail = str(exc) if settings.debug else "Internal server error"
    return _error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, detail, "internal_error")


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(store: Store):
    """Check gateway health."""
    return HealthResponse(status="ok", version=settings.version, store=store.name)


app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "zinasite.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )

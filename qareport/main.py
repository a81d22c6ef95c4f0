"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from qareport.api import router as api_router
from qareport.core.autosave import get_checklist_saver
from qareport.core.errors import AuthenticationRequired, QAReportError, ValidationFailed
from qareport.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Don't drop queued checklist edits on shutdown
    if get_checklist_saver.cache_info().currsize:
        await get_checklist_saver().shutdown()


app = FastAPI(
    title="QA Report Service",
    description="Website QA checklists with rating, next steps, sharing and export",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(QAReportError)
async def qa_report_error_handler(request: Request, exc: QAReportError) -> JSONResponse:
    """Turn domain failures into JSON errors; the session stays usable."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={"path": request.url.path, "method": request.method, "status_code": exc.status_code},
    )

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationRequired) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed input in the same shape as every other failure."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        problems.append(f"{field}: {error['msg']}" if field else error["msg"])
    return await qa_report_error_handler(request, ValidationFailed("; ".join(problems)))


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])

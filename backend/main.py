"""
Main FastAPI application
"""
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.config import get_settings
from backend.database import Database
from backend.errors import LeafServiceError
from backend.api import suppliers, deductions, collections, leaf_counts
from backend.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database.from_settings(settings)
    await database.ping()
    logger.info("Database connected")

    if settings.CREATE_TABLES:
        await database.create_all()
        logger.info("Database tables created")

    app.state.database = database
    yield

    await database.dispose()
    logger.info("Database connection pool closed")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


# --- Error envelope ---

def _error_body(message: str, detail=None) -> dict:
    body = {"success": False, "message": message}
    if detail is not None:
        body["error"] = detail
    return body


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


@app.exception_handler(LeafServiceError)
async def leaf_service_error_handler(request: Request, exc: LeafServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
        detail = exc.detail if settings.DEBUG else None
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        detail = exc.detail
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, detail))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=_error_body("Invalid request", jsonable_errors(exc)),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=_error_body(message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    detail = str(exc) if settings.DEBUG else None
    return JSONResponse(status_code=500, content=_error_body("Internal server error", detail))


# Include routers
app.include_router(suppliers.router, prefix="/api/suppliers", tags=["Suppliers"])
app.include_router(deductions.router, prefix="/api/deductions", tags=["Deductions"])
app.include_router(collections.router, prefix="/api/collections", tags=["Collections"])
app.include_router(leaf_counts.router, prefix="/api/leaf-count", tags=["Leaf Count"])


@app.get("/api/health")
async def health_check():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now().isoformat(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.DEBUG
    )

"""
LegalPro Lite API
=================

FastAPI application for legal practice management.

Routers:
- /api/auth/*         - Accounts and sessions (api_auth.py)
- /api/{resource}     - Cases, clients, hearings, alerts, time entries, invoices (api_records.py)
- /api/documents/*    - Folders, files and uploads (api_documents.py)
- /uploads/{name}     - Stored files, owner only
- /health             - Liveness and database check

Errors are always rendered as {"error": "<message>"}.
"""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api_auth import router as auth_router
from .api_documents import router as documents_router
from .api_documents import uploads_router
from .api_records import routers as record_routers
from .config import get_settings
from .db.session import get_db_session, init_db
from .errors import LegalProError
from .middleware import SecurityHeadersMiddleware
from .schemas import HealthResponse

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title="LegalPro API",
    description="Case, client, hearing and billing management for law practices",
    version=settings.service_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS: the session cookie requires credentials, so origins must be explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)


app.include_router(auth_router, prefix="/api")
for record_router in record_routers:
    app.include_router(record_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(uploads_router)


# =============================================================================
# Lifecycle
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    current = get_settings()
    logger.info(f"Starting LegalPro API v{current.service_version} ({current.environment})")
    for warning in current.validate_config():
        logger.warning(f"Config: {warning}")
    init_db()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    database = "ok"
    try:
        with get_db_session() as db:
            db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check database error: {e}")
        database = "unavailable"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        version=get_settings().service_version,
        database=database,
    )


# =============================================================================
# Error handlers
# =============================================================================

@app.exception_handler(LegalProError)
async def legalpro_error_handler(request: Request, exc: LegalProError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def api_http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def api_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors without echoing request inputs."""
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"error": "Invalid request", "details": details})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler - always return valid JSON"""
    logger.exception(f"Unhandled exception on {request.url.path}: {exc.__class__.__name__}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

"""
Placement Readiness API - FastAPI Application Entry Point.

This is the main application module that:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Opens the student store at startup and closes it at shutdown
4. Implements request ID middleware (X-Request-ID header)
5. Renders every error as an {"error": ...} JSON body
6. Registers all API route handlers

The application follows a modular architecture:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: Student store and scoring logic
- logging_config.py: Structured logging configuration
- database.py: Engine construction and schema creation
"""

import os
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id, SERVICE_NAME
)
from app.routes import students, readiness
from app.database import get_database_url
from app.services.student_store import StudentStore

VERSION = "1.0.0"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the single student store for the lifetime of the application."""
    store = StudentStore(get_database_url())
    await store.open()
    app.state.store = store
    try:
        yield
    finally:
        await store.close()


# ──────────────────────────────────────────────────────────────
# Create FastAPI application
# ──────────────────────────────────────────────────────────────
app = FastAPI(
    title="Placement Readiness API",
    description=(
        "Stores per-student aptitude, coding, resume and interview scores, "
        "computes a weighted readiness score and suggests an improvement plan."
    ),
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# ──────────────────────────────────────────────────────────────
# CORS Middleware
#
# Open to all origins by default so the dashboard can be served
# from anywhere. Restrict with CORS_ORIGINS.
# ──────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)


# ──────────────────────────────────────────────────────────────
# Request ID Middleware
#
# The dashboard may send its own X-Request-ID so that a click and the
# resulting score update share one ID; otherwise a UUID is generated.
# The ID goes into request_id_var (so store and scoring log lines carry
# it) and back out in the X-Request-ID header. 5xx responses are logged
# at ERROR so failed score writes stand out from routine traffic.
# ──────────────────────────────────────────────────────────────
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or generate_request_id()
    request_id_var.set(req_id)

    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", "")
        })

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "ERROR" if response.status_code >= 500 else "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


# ──────────────────────────────────────────────────────────────
# Error responses
#
# Every error body is {"error": "<message>"}; no internal detail.
# ──────────────────────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        log_with_context(logger, "ERROR",
            f"{request.method} {request.url.path} failed: {exc.detail}",
            extra_data={"status_code": exc.status_code})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)},
                        headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    log_with_context(logger, "WARNING",
        f"Rejected request body for {request.method} {request.url.path}",
        extra_data={"errors": exc.errors()})
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


# ──────────────────────────────────────────────────────────────
# Register API routes
# ──────────────────────────────────────────────────────────────
app.include_router(students.router, tags=["Students"])
app.include_router(readiness.router, tags=["Readiness"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for container health checks and monitoring."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": "Placement Readiness API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "student_detail": "GET /student/{name}",
            "register_student": "POST /student",
            "readiness": "POST /readiness",
            "improvement_plan": "POST /improvement-plan"
        }
    }


def run():
    """Start the API server with uvicorn on the configured host and port."""
    import uvicorn

    log_with_context(logger, "INFO", f"Server is running on http://localhost:{PORT}",
                     extra_data={"host": HOST, "port": PORT})
    uvicorn.run(app, host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    run()

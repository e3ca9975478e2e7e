"""
FastAPI Application Entry Point - Application initialization and configuration
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
import logging
import sys
import time

from task_tracker.core.config import settings, validate_config, is_production
from task_tracker.core.exceptions import TaskTrackerError
from task_tracker.database import check_db_connection, close_db_connections, get_pool_stats, init_db

# Configure application logging with timestamp and log level
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run startup checks, then clean up on shutdown"""
    startup_event()
    yield
    shutdown_event()

def create_application() -> FastAPI:
    """
    Factory function to create and configure FastAPI application.
    Tests reuse the module-level app and override get_db.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/api/docs" if not is_production() else None,  # Hide Swagger docs in production
        redoc_url="/api/redoc" if not is_production() else None,
        description="Task tracking with a sequential delivery workflow",
        lifespan=lifespan,
    )

    setup_middleware(app)  # Configure CORS and request logging
    setup_exception_handlers(app)  # Configure global error handling
    setup_routers(app)  # Mount API route handlers

    return app

def setup_middleware(app: FastAPI) -> None:
    """Configure application middleware - runs on every request/response"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with method, path, status, and processing time"""
        start_time = time.time()
        logger.info(f"➡️  {request.method} {request.url.path}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"⬅️  {request.method} {request.url.path} "
            f"- Status: {response.status_code} - Time: {process_time:.2f}s"
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response

def error_body(error: str, detail, code: str = None) -> dict:
    """Uniform error payload shared by every handler"""
    body = {"error": error, "detail": detail, "timestamp": time.time()}
    if code:
        body["code"] = code
    return body

def setup_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers for consistent error responses"""

    @app.exception_handler(TaskTrackerError)
    async def domain_exception_handler(request: Request, exc: TaskTrackerError):
        """
        Expected business errors (validation, not found, workflow rules).
        `code` lets clients tell OUT_OF_SEQUENCE from CHECKLIST_INCOMPLETE etc.
        """
        logger.warning(f"❌ {exc.code} on {request.method} {request.url.path}: {exc.message}")
        body = error_body(exc.message, exc.details, code=exc.code)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handle Pydantic validation errors (missing or blank fields).
        Returns field-level error details with a 400 status.

        An id in the URL that is not a UUID cannot match any row, so it is
        reported as 404 like any other unknown id.
        """
        path_fields = [error["loc"][-1] for error in exc.errors() if error["loc"][:1] == ("path",)]
        if path_fields:
            if "task_id" in path_fields:
                message, code = "Task not found", "TASK_NOT_FOUND"
            else:
                message, code = "Checklist item not found", "CHECKLIST_ITEM_NOT_FOUND"
            logger.warning(f"❌ {code} on {request.method} {request.url.path}: malformed id")
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=error_body(message, None, code=code)
            )

        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(x) for x in error["loc"]),  # Field path (e.g., "body.title")
                "message": error["msg"],
                "type": error["type"]
            })

        logger.warning(f"❌ Validation error on {request.url.path}: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Validation Error", errors, code="VALIDATION_ERROR")
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """
        Handle database errors - logs full details but returns generic message.
        Never expose database schema or internal errors to client.
        """
        logger.error(
            f"❌ Database error on {request.method} {request.url.path}: {str(exc)}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                "Database Error",
                "An error occurred while processing your request. Please try again later.",
                code="DATABASE_ERROR",
            )
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Catch-all handler for unexpected exceptions"""
        logger.error(
            f"❌ Unhandled exception on {request.method} {request.url.path}: {str(exc)}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                "Internal Server Error",
                "An unexpected error occurred.",
                code="INTERNAL_ERROR",
            )
        )

def startup_event() -> None:
    """
    Validate config, create tables and check the database.
    Fail fast: If checks fail, application won't start.
    """
    logger.info("🚀 Starting Task Tracker...")

    try:
        validate_config()
    except Exception as e:
        logger.error(f"❌ Configuration validation failed: {e}")
        sys.exit(1)

    if settings.AUTO_CREATE_TABLES:
        init_db()

    if not check_db_connection():
        logger.error("❌ Cannot connect to database. Exiting.")
        sys.exit(1)

    logger.info(f"📊 Database pool: {get_pool_stats()}")
    logger.info("✅ Application started successfully")
    logger.info(f"🌍 Environment: {settings.ENVIRONMENT}")
    logger.info(f"🔧 Debug mode: {settings.DEBUG}")

def shutdown_event() -> None:
    """Close pooled connections gracefully"""
    logger.info("🛑 Shutting down Task Tracker...")
    close_db_connections()
    logger.info("✅ Shutdown complete")

def setup_routers(app: FastAPI) -> None:
    """Mount API routers"""

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint for monitoring and load balancers.
        Returns application status, database connectivity, and version info.
        """
        db_healthy = check_db_connection()
        return {
            "status": "healthy" if db_healthy else "unhealthy",
            "database": "connected" if db_healthy else "disconnected",
            "pool_stats": get_pool_stats(),
            "timestamp": time.time(),
            "version": settings.APP_VERSION
        }

    from task_tracker.api import tasks, checklist, pr_metadata
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
    app.include_router(checklist.router, prefix="/api/tasks", tags=["PR Checklist"])
    app.include_router(pr_metadata.router, prefix="/api/tasks", tags=["PR Metadata"])

# Create application instance
app = create_application()

if __name__ == "__main__":
    """
    Direct execution entry point - for development only.
    Production: Use `uvicorn task_tracker.main:app --host 0.0.0.0 --port 8000`
    """
    import uvicorn
    uvicorn.run(
        "task_tracker.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )

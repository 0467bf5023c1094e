# main.py
import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_database_manager, get_settings, lifespan
from .routes import routers
from .schemas import HealthCheckResponse, RootResponse, ValidationErrorDetail, ValidationErrorResponse

settings = get_settings()

# Setup logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.origin],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} - {elapsed_ms:.1f} ms")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        loc = error.get("loc") or ("request",)
        # Drop the leading "body"/"query"/"path" part of the location
        location = [str(part) for part in loc[1:]]
        details.append(ValidationErrorDetail(
            field=".".join(location) or str(loc[0]),
            message=error.get("msg", "Invalid value"),
            input_value=error.get("input") if _is_plain(error.get("input")) else None
        ))

    body = ValidationErrorResponse(
        error="validation_error",
        message=details[0].message if details else "Invalid request",
        details=details
    )
    return JSONResponse(status_code=400, content=body.model_dump())


def _is_plain(value) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


for router in routers:
    app.include_router(router)


# Routes
@app.get("/", response_model=RootResponse, tags=["Root"])
async def root():
    """Root endpoint - Always accessible"""
    return {
        "message": "running",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthCheckResponse, tags=["Health"])
async def health_check():
    """Health check endpoint - Always accessible"""
    db_manager = get_database_manager()
    try:
        if db_manager.is_connected():
            await db_manager.get_database().command('ping')
            db_status = "connected"
        else:
            db_status = "disconnected"
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        db_status = "error"

    return {
        "status": "healthy",
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host=settings.host, port=settings.port, reload=settings.reload)

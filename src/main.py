"""FastAPI application entry point."""

import logging
import traceback
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api import contact, products, users
from src.config import get_settings
from src.database import dispose_engine
from src.errors import AppError
from src.services.image_host import CloudinaryImageHost
from src.services.mailer import Mailer

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build external clients on startup and release them on shutdown."""
    app.state.image_host = CloudinaryImageHost(settings)
    app.state.mailer = Mailer(settings)
    await app.state.image_host.connect()
    yield
    await app.state.image_host.close()
    dispose_engine()


app = FastAPI(
    title="Inventory API",
    description="Inventory management backend with accounts, products and image uploads",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_body(message: str, exc: BaseException | None = None) -> dict:
    """Error envelope; the stack trace is only exposed outside production."""
    stack = None
    if exc is not None and not settings.is_production:
        stack = "".join(traceback.format_exception(exc))
    return {"message": message, "stack": stack}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Map a service error kind to its status code."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a client validation failure."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(message, exc),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), exc),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(str(exc) or "Internal Server Error", exc),
    )


# Register routers
app.include_router(users.router)
app.include_router(products.router)
app.include_router(contact.router)

# Locally staged uploads
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.host, port=settings.port)

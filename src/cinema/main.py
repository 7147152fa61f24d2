"""
FastAPI application entry point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from cinema.api import halls, movies, repertoires, reservations, users
from cinema.api.deps import get_current_username
from cinema.core.config import settings
from cinema.core.database import engine, init_db
from cinema.core.logging_config import setup_logging
from cinema.core.metrics import get_metrics
from cinema.core.redis import redis_client
from cinema.middleware.tracing import TracingMiddleware

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    logger.info(f"🚀 Starting up {settings.APP_NAME} {settings.APP_VERSION}...")

    if settings.AUTO_CREATE_TABLES:
        init_db()

    if settings.REDIS_ENABLED:
        logger.info("🔴 Connecting to Redis...")
        redis_client.connect()

    yield

    logger.info("🛑 Shutting down...")
    redis_client.close()
    engine.dispose()
    logger.info("✅ Cleanup complete")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Cinema halls, movies, screenings and seat reservations",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is reported as 400 with a readable message"""
    messages = []
    for error in exc.errors():
        cause = error.get("ctx", {}).get("error")
        message = str(cause) if cause else error.get("msg", "invalid input")
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(message if not field or cause else f"{field}: {message}")

    logger.info(f"Invalid request to {request.url.path}: {messages}")
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TracingMiddleware)


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint"""
    redis_status = "healthy" if redis_client.redis else "unavailable"

    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "redis": redis_status,
    }


@app.get("/metrics", tags=["Health"])
def metrics():
    """Prometheus metrics"""
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)


# Include routers
authenticated = [Depends(get_current_username)]

app.include_router(users.router, tags=["Users"])
app.include_router(halls.router, tags=["Halls"], dependencies=authenticated)
app.include_router(movies.router, tags=["Movies"], dependencies=authenticated)
app.include_router(repertoires.router, tags=["Repertoires"], dependencies=authenticated)
app.include_router(reservations.router, tags=["Reservations"], dependencies=authenticated)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "cinema.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )

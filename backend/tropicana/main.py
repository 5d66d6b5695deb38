"""
Tropicana HMS application entry point
Multi-property hotel management and booking platform
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from tropicana import __version__
from tropicana.config import settings
from tropicana.database import init_db
from tropicana.logging_config import configure_logging
from tropicana.routers import (
    auth, properties, room_types, rooms, rates, availability, guests, reservations,
    payments, webhooks, stays, tasks, content, site, public, analytics
)
from tropicana.services.exceptions import ServiceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    configure_logging()

    init_db()

    from tropicana.services.notifications import register_event_handlers
    register_event_handlers()

    logger.info(f"{settings.APP_NAME} {__version__} started")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-property hotel management and booking platform",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.mount(settings.MEDIA_URL_PREFIX, StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False), name="uploads")

app.include_router(auth.router)
app.include_router(properties.router)
app.include_router(room_types.router)
app.include_router(rooms.router)
app.include_router(rates.router)
app.include_router(availability.router)
app.include_router(guests.router)
app.include_router(reservations.router)
app.include_router(payments.router)
app.include_router(webhooks.router)
app.include_router(stays.router)
app.include_router(tasks.router)
app.include_router(content.router)
app.include_router(site.router)
app.include_router(public.router)
app.include_router(analytics.router)


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "description": "Multi-property hotel management and booking platform"
    }


@app.get("/health")
def health_check():
    """Health check"""
    return {"status": "healthy"}

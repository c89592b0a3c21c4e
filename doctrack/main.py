from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from doctrack.api.documents import router as documents_router
from doctrack.api.notifications import router as notifications_router
from doctrack.api.offices import router as offices_router
from doctrack.api.users import router as users_router
from doctrack.config import settings
from doctrack.db import SessionLocal
from doctrack.errors import register_error_handlers
from doctrack.logging import configure_logging
from doctrack.services.seed import seed_directory


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_on_startup:
        db = SessionLocal()
        try:
            seed_directory(db)
        finally:
            db.close()
    yield


app = FastAPI(
    title=f"{settings.brand_name} API",
    description=settings.brand_tagline,
    lifespan=lifespan,
)

configure_logging()
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(documents_router)
_include_api_router(users_router)
_include_api_router(offices_router)
_include_api_router(notifications_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)

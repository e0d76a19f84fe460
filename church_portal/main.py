from contextlib import asynccontextmanager

from fastapi import FastAPI

from church_portal.api.v1.api import api_router
from church_portal.core.config import settings
from church_portal.core.errors import register_exception_handlers
from church_portal.core.logging import configure_logging
from church_portal.db.session import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Production schema is managed by Alembic
    if not settings.is_production:
        await init_db()
    yield


configure_logging(settings)

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
register_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health() -> dict:
    return {"status": "ok"}

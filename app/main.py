from contextlib import asynccontextmanager
from fastapi import FastAPI

from app.core.cache import cache
from app.core.config import settings
from app.core.database.db import engine
from app.core.database.base import Base
from app.core.logger_setup import setup_logging

# Models must be imported before create_all
import hosttree.domain.models.host_item  # noqa: F401
import videofeed.domain.models.id_table  # noqa: F401

# Routers
from hosttree.routers.tree import router as tree_router
from hosttree.routers.preview import router as preview_router

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await cache.init()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await engine.dispose()
    await cache.close()



app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    debug=settings.debug,
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok"}


app.include_router(tree_router)
app.include_router(preview_router)

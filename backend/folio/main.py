"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from folio.api.auth import router as auth_router
from folio.api.deps import get_rules
from folio.api.portfolio_routes import router as portfolio_router
from folio.config import UI_DIST_DIR, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing or invalid configuration aborts startup
    settings = get_settings()
    get_rules(settings)
    logger.info(f"Serving snapshots from {settings.data_dir.resolve()}")
    yield


app = FastAPI(title="Folio", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(portfolio_router)
app.include_router(auth_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}


# Mounted last: routes above take precedence over the UI bundle
app.mount("/", StaticFiles(directory=UI_DIST_DIR, html=True), name="ui")

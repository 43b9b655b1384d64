from __future__ import annotations  # FastAPI server exposing the coaching engine

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config.engine import EngineConfig
from config.settings import settings
from storage.migrate import migrate


logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:  # Validate config and migrate before serving
    config = EngineConfig.from_settings(settings)
    migrate(settings.DB_PATH)
    logger.info(
        "Coach API ready db=%s provider=%s weights=%s",
        settings.DB_PATH,
        settings.SCORER_PROVIDER,
        config.weights.as_dict(),
    )
    yield


def create_app() -> FastAPI:  # Build the application with routes and middleware
    app = FastAPI(title="Adaptive Coach API", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.get("/api/health")
    def health() -> Dict[str, str]:  # Liveness probe
        return {"status": "ok"}

    return app


app = create_app()

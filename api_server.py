from __future__ import annotations  # FastAPI server exposing interview projections

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config.settings import settings
from storage.migrate import migrate


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:  # Ensure tables exist before serving
    migrate(settings.DB_PATH)
    logger.info("Admin API ready db=%s", settings.DB_PATH)
    yield


app = FastAPI(title="Screening Interview Admin API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.include_router(router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

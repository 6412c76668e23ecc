from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dicekit.config import settings
from dicekit.routers import dice


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logging.getLogger("dicekit").setLevel(settings.log_level.upper())
    yield


app = FastAPI(title="Dicekit", debug=settings.debug, lifespan=lifespan)

app.include_router(dice.router)


@app.get("/")
async def index() -> dict[str, str]:
    return {"name": "Dicekit", "status": "ok"}

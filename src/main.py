from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.lines import router as lines_router
from src.adapters.api.controllers.lines import selection_router

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="LineTrack")
app.include_router(lines_router)
app.include_router(selection_router)


def _reveal_errors() -> bool:
    flag = (os.getenv("LINETRACK_REVEAL_ERRORS") or "").strip().lower()
    return flag in {"1", "true", "yes", "on"}


@app.exception_handler(Exception)
async def internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Request to %s failed", request.url.path)

    detail = "Internal Server Error"
    if _reveal_errors():
        detail = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}

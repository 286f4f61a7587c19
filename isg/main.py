"""
İSG Risk Engine FastAPI Application.

Fine-Kinney risk scoring and multi-step OHS wizards for a remote UI:
  GET  /health              → {"status": "ok", ...}
  /risk/*                   → scoring and banding
  /wizards, /sessions/*     → wizard sessions (gating, progress, submit)
  POST /hazards/analyze     → AI hazard analysis, banded by the engine
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from isg.api.routes.hazard import router as hazard_router
from isg.api.routes.health import router as health_router
from isg.api.routes.risk import router as risk_router
from isg.api.routes.wizard import router as wizard_router
from isg.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("isg")

app = FastAPI(
    title="İSG Risk Engine",
    description="Fine-Kinney risk scoring and OHS wizard sessions",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(risk_router)
app.include_router(wizard_router)
app.include_router(hazard_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(f"Validation Error. Raw body: {body.decode('utf-8', 'replace')[:500]} | Errors: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc), "body": body.decode("utf-8", "replace")[:100]},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors may carry exception objects in 'ctx'; stringify them."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("isg.main:app", host=settings.host, port=settings.port)

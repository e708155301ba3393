# feedboard/main.py
from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from feedboard.core.config import settings
from feedboard.db.session import init_db
from feedboard.api.routes_topics import router as topics_router
from feedboard.api.routes_feeds import router as feeds_router


BACKEND_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=BACKEND_ROOT / ".env", override=False)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(title="Feedboard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(topics_router, prefix="/topics", tags=["topics"])
app.include_router(feeds_router, tags=["feeds"])


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = first.get("loc") or ()
        field = str(loc[-1]) if loc else "request"
        message = f"Invalid {field}: {first.get('msg', 'bad value')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.on_event("startup")
def on_startup():
    # A missing database must not keep the API down
    try:
        init_db()
    except SQLAlchemyError as e:
        log.warning("Database not ready (non-critical): %s", e)


@app.get("/health")
def health_check():
    return {"status": "ok", "version": VERSION}

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import case, chat, person
from .config import settings
from .db.store import StoreError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Rechtsintake",
    version="0.1.0",
    description="Strukturierte Erstaufnahme von Rechtsfällen (keine Rechtsberatung).",
)

wildcard = "*" in settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if wildcard else settings.cors_origins,
    # Credentials cannot be combined with wildcard origins.
    allow_credentials=not wildcard,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Conversation-Id"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Request failed | path=%s | error=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Interner Serverfehler"})


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(chat.router)
app.include_router(person.router)
app.include_router(case.router)

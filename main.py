import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bank import get_bank
from db import init_db
from errors import NotFound, PersistenceWriteError, SessionStateError, ValidationError, VaultError

# Routers
from routers.admin import router as admin_router
from routers.health import router as health_router
from routers.questions import router as questions_router
from routers.session import router as session_router

logger = logging.getLogger("dsa-vault")
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()]

init_db()

app = FastAPI(title="DSA Vault – Question API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STATUS = {
    NotFound: 404,
    ValidationError: 422,
    SessionStateError: 409,
    PersistenceWriteError: 503,
}


@app.exception_handler(VaultError)
async def vault_error_handler(request: Request, exc: VaultError):
    status_code = next((code for cls, code in _STATUS.items() if isinstance(exc, cls)), 500)
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "code": exc.code, "detail": exc.message, **exc.details},
    )


def _log_collection(questions):
    logger.info("Question collection now holds %d questions", len(questions))


get_bank().subscribe(_log_collection)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(questions_router)  # /questions, /topics, /stats
app.include_router(session_router)  # /session/...
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...

from __future__ import annotations

from fastapi import APIRouter

from bank import reload_bank

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reload")
def reload_questions():
    # re-read the slot; a malformed blob reloads as empty (see /health/storage)
    n = reload_bank()
    return {"ok": True, "count": n}

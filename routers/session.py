from __future__ import annotations

from fastapi import APIRouter

from edit_session import get_session
from schemas.questions import Question
from schemas.session import QuestionForm, SessionOut

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionOut)
def session_state():
    return get_session().snapshot()


@router.post("/add", response_model=SessionOut)
def session_add():
    s = get_session()
    s.start_add()
    return s.snapshot()


@router.post("/edit/{qid}", response_model=SessionOut)
def session_edit(qid: str):
    s = get_session()
    s.start_edit(qid)
    return s.snapshot()


@router.post("/cancel", response_model=SessionOut)
def session_cancel():
    s = get_session()
    s.cancel()
    return s.snapshot()


@router.post("/submit", response_model=Question)
def session_submit(form: QuestionForm):
    return get_session().submit(form)

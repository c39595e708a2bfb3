from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from bank import get_bank
from edit_session import get_session
from schemas.questions import ALL, Question, QuestionFields, QuestionQuery, QuestionStats

router = APIRouter(tags=["questions"])


@router.get("/questions", response_model=List[Question])
def list_questions(
    search: str = "",
    difficulty: str = Query(default=ALL, pattern="^(all|Easy|Medium|Hard)$"),
    topic: str = ALL,
):
    query = QuestionQuery(search_term=search, difficulty_filter=difficulty, topic_filter=topic)
    return get_bank().filtered_view(query)


@router.get("/questions/{qid}", response_model=Question)
def get_question_detail(qid: str):
    return get_bank().get(qid)


@router.post("/questions", response_model=Question, status_code=status.HTTP_201_CREATED)
def create_question(fields: QuestionFields):
    return get_bank().create(fields)


@router.put("/questions/{qid}", response_model=Question)
def update_question(qid: str, fields: QuestionFields):
    return get_bank().update(qid, fields)


@router.delete("/questions/{qid}")
def delete_question(qid: str, confirm: bool = False):
    if not confirm:
        raise HTTPException(status_code=409, detail="delete requires confirm=true")
    # the query flag is the environment's answer to the confirmation prompt
    removed = get_session().delete(qid, lambda _qid: confirm)
    if not removed:
        raise HTTPException(status_code=404, detail="question not found")
    return {"ok": True, "id": qid}


@router.get("/topics", response_model=List[str])
def list_topics():
    return get_bank().distinct_topics()


@router.get("/stats", response_model=QuestionStats)
def question_stats():
    return get_bank().statistics()

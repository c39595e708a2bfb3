# services/vault/schemas/session.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from schemas.questions import CamelModel, Difficulty, Question


class SessionState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"


class QuestionForm(CamelModel):
    """Raw form input: every field is plain text, tags comma separated."""

    title: str = ""
    description: str = ""
    difficulty: Difficulty = Difficulty.EASY
    topic: str = ""
    tags: str = ""
    solution: str = ""
    time_complexity: str = ""
    space_complexity: str = ""

    @classmethod
    def from_question(cls, q: Question) -> "QuestionForm":
        return cls(
            title=q.title,
            description=q.description,
            difficulty=q.difficulty,
            topic=q.topic,
            tags=", ".join(q.tags),
            solution=q.solution or "",
            time_complexity=q.time_complexity or "",
            space_complexity=q.space_complexity or "",
        )


class SessionOut(CamelModel):
    state: SessionState
    question_id: Optional[str] = None
    form: Optional[QuestionForm] = None

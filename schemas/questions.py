# services/vault/schemas/questions.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ALL = "all"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class CamelModel(BaseModel):
    # JSON keys are camelCase (createdAt, timeComplexity, ...); python names stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionFields(CamelModel):
    """Mutable attributes of a question: everything except id and createdAt."""

    title: str
    description: str
    difficulty: Difficulty
    topic: str
    tags: List[str] = Field(default_factory=list)
    solution: Optional[str] = None
    time_complexity: Optional[str] = None
    space_complexity: Optional[str] = None

    @field_validator("title", "description", "topic")
    @classmethod
    def _required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("tags")
    @classmethod
    def _non_empty_tags(cls, v: List[str]) -> List[str]:
        tags = [t.strip() for t in v]
        if any(not t for t in tags):
            raise ValueError("tags must not be empty")
        return tags


class Question(QuestionFields):
    id: str
    created_at: datetime


class QuestionQuery(CamelModel):
    search_term: str = ""
    difficulty_filter: Union[Difficulty, Literal["all"]] = ALL
    topic_filter: str = ALL


class QuestionStats(CamelModel):
    total: int
    easy_count: int
    medium_count: int
    hard_count: int

from __future__ import annotations

from typing import Iterable, List, Sequence

from schemas.questions import ALL, Difficulty, Question, QuestionQuery, QuestionStats


def matches(q: Question, query: QuestionQuery) -> bool:
    term = query.search_term.lower()
    if term:
        hit = (
            term in q.title.lower()
            or term in q.description.lower()
            or any(term in tag.lower() for tag in q.tags)
        )
        if not hit:
            return False

    if query.difficulty_filter != ALL and q.difficulty != query.difficulty_filter:
        return False

    if query.topic_filter != ALL and q.topic != query.topic_filter:
        return False

    return True


def filter_questions(questions: Sequence[Question], query: QuestionQuery) -> List[Question]:
    # keep input order; filtering never re-sorts
    return [q for q in questions if matches(q, query)]


def distinct_topics(questions: Iterable[Question]) -> List[str]:
    """Topics currently in use, each once, in order of first appearance."""
    return list(dict.fromkeys(q.topic for q in questions))


def statistics(questions: Sequence[Question]) -> QuestionStats:
    counts = {d: 0 for d in Difficulty}
    for q in questions:
        counts[q.difficulty] += 1
    return QuestionStats(
        total=len(questions),
        easy_count=counts[Difficulty.EASY],
        medium_count=counts[Difficulty.MEDIUM],
        hard_count=counts[Difficulty.HARD],
    )

# services/vault/bank.py

from __future__ import annotations

import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import Callable, List, Optional

import query as _query
from errors import NotFound, PersistenceWriteError
from schemas.questions import Question, QuestionFields, QuestionQuery, QuestionStats
from storage import QuestionStore, store_from_env

logger = logging.getLogger("dsa-vault.bank")

Listener = Callable[[List[Question]], None]


def _snapshot(questions: List[Question]) -> List[Question]:
    return [q.model_copy(deep=True) for q in questions]


class QuestionBank:
    """
    Authoritative in-memory question collection, newest first.

    Every mutation persists the full collection through the store before it
    returns. If the store rejects the write the in-memory change is rolled back
    and the PersistenceWriteError propagates, so memory never runs ahead of the
    slot.
    """

    def __init__(self, store: QuestionStore, questions: Optional[List[Question]] = None):
        self.store = store
        self._questions: List[Question] = list(questions) if questions is not None else store.load()
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    # --- reads ------------------------------------------------------------------

    def list(self) -> List[Question]:
        with self._lock:
            return _snapshot(self._questions)

    def get(self, question_id: str) -> Question:
        with self._lock:
            q = self._find(question_id)
            if q is None:
                raise NotFound(question_id)
            return q.model_copy(deep=True)

    def distinct_topics(self) -> List[str]:
        with self._lock:
            return _query.distinct_topics(self._questions)

    def filtered_view(self, query: Optional[QuestionQuery] = None) -> List[Question]:
        with self._lock:
            return _snapshot(_query.filter_questions(self._questions, query or QuestionQuery()))

    def statistics(self) -> QuestionStats:
        with self._lock:
            return _query.statistics(self._questions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._questions)

    # --- mutations --------------------------------------------------------------

    def create(self, fields: QuestionFields) -> Question:
        with self._lock:
            question = Question(
                id=self._new_id(),
                created_at=datetime.now(UTC),
                **fields.model_dump(),
            )
            self._commit([question, *self._questions])
            logger.info("Created question %s (%s)", question.id, question.title)
            return question.model_copy(deep=True)

    def update(self, question_id: str, fields: QuestionFields) -> Question:
        with self._lock:
            for idx, q in enumerate(self._questions):
                if q.id == question_id:
                    break
            else:
                raise NotFound(question_id)

            updated = Question(id=q.id, created_at=q.created_at, **fields.model_dump())
            questions = list(self._questions)
            questions[idx] = updated
            self._commit(questions)
            logger.info("Updated question %s", question_id)
            return updated.model_copy(deep=True)

    def delete(self, question_id: str) -> bool:
        with self._lock:
            questions = [q for q in self._questions if q.id != question_id]
            removed = len(questions) != len(self._questions)
            # persist even on a miss; the slot always mirrors memory
            self._commit(questions)
            if removed:
                logger.info("Deleted question %s", question_id)
            else:
                logger.warning("Attempted to delete non-existent question %s", question_id)
            return removed

    def reload(self) -> int:
        with self._lock:
            self._questions = self.store.load()
            self._notify()
            return len(self._questions)

    # --- change notification ----------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- internals --------------------------------------------------------------

    def _find(self, question_id: str) -> Optional[Question]:
        return next((q for q in self._questions if q.id == question_id), None)

    def _new_id(self) -> str:
        existing = {q.id for q in self._questions}
        while True:
            candidate = uuid.uuid4().hex
            if candidate not in existing:
                return candidate

    def _commit(self, questions: List[Question]) -> None:
        previous = self._questions
        self._questions = questions
        try:
            self.store.save(self._questions)
        except PersistenceWriteError:
            self._questions = previous
            logger.error("Write rejected by %s store; in-memory change rolled back", self.store.name)
            raise
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(_snapshot(self._questions))
            except Exception:
                logger.exception("Question bank listener %r failed", listener)


_bank: Optional[QuestionBank] = None
_bank_lock = threading.Lock()


# Public API
def get_bank() -> QuestionBank:
    global _bank
    with _bank_lock:
        if _bank is None:
            _bank = QuestionBank(store_from_env())
        return _bank


def reset_bank(store: Optional[QuestionStore] = None) -> QuestionBank:
    global _bank
    with _bank_lock:
        _bank = QuestionBank(store if store is not None else store_from_env())
        return _bank


def reload_bank() -> int:
    return get_bank().reload()

# services/vault/edit_session.py

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from bank import QuestionBank, get_bank
from errors import SessionStateError, ValidationError
from schemas.questions import Question, QuestionFields
from schemas.session import QuestionForm, SessionOut, SessionState

logger = logging.getLogger("dsa-vault.session")

REQUIRED_FIELDS = ("title", "description", "topic")

Confirm = Callable[[str], bool]


def parse_tags(raw: str) -> List[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


def _optional(s: str) -> Optional[str]:
    s = s.strip()
    return s or None


def form_to_fields(form: QuestionForm) -> QuestionFields:
    """
    Turn raw form input into question fields.
    Raises ValidationError naming every required field that trims to empty.
    """
    missing = [name for name in REQUIRED_FIELDS if not getattr(form, name).strip()]
    if missing:
        raise ValidationError(missing)

    return QuestionFields(
        title=form.title.strip(),
        description=form.description.strip(),
        difficulty=form.difficulty,
        topic=form.topic.strip(),
        tags=parse_tags(form.tags),
        solution=_optional(form.solution),
        time_complexity=_optional(form.time_complexity),
        space_complexity=_optional(form.space_complexity),
    )


class EditSession:
    """
    Idle / Editing state machine between a question form and the bank.

    Editing is bound to an existing question id when started with start_edit,
    and unbound (a new question) when started with start_add.
    """

    def __init__(self, bank: QuestionBank):
        self.bank = bank
        self.state = SessionState.IDLE
        self.question_id: Optional[str] = None
        self.form: Optional[QuestionForm] = None
        self._lock = threading.RLock()

    def snapshot(self) -> SessionOut:
        with self._lock:
            return SessionOut(state=self.state, question_id=self.question_id, form=self.form)

    def start_add(self) -> QuestionForm:
        with self._lock:
            self._require(SessionState.IDLE)
            self.state = SessionState.EDITING
            self.question_id = None
            self.form = QuestionForm()
            return self.form

    def start_edit(self, question_id: str) -> QuestionForm:
        with self._lock:
            self._require(SessionState.IDLE)
            q = self.bank.get(question_id)  # NotFound leaves us idle
            self.state = SessionState.EDITING
            self.question_id = q.id
            self.form = QuestionForm.from_question(q)
            return self.form

    def cancel(self) -> None:
        with self._lock:
            self._require(SessionState.EDITING)
            self._to_idle()

    def submit(self, form: QuestionForm) -> Question:
        with self._lock:
            self._require(SessionState.EDITING)
            self.form = form
            fields = form_to_fields(form)
            if self.question_id is None:
                question = self.bank.create(fields)
            else:
                question = self.bank.update(self.question_id, fields)
            self._to_idle()
            return question

    def delete(self, question_id: str, confirm: Confirm) -> bool:
        """Delete only after confirm(question_id) returns True."""
        with self._lock:
            if not confirm(question_id):
                logger.info("Delete of %s not confirmed; nothing removed", question_id)
                return False
            removed = self.bank.delete(question_id)
            if removed and self.question_id == question_id:
                self._to_idle()
            return removed

    def _require(self, state: SessionState) -> None:
        if self.state != state:
            raise SessionStateError(
                f"edit session is {self.state.value}, expected {state.value}",
                {"state": self.state.value},
            )

    def _to_idle(self) -> None:
        self.state = SessionState.IDLE
        self.question_id = None
        self.form = None


_session: Optional[EditSession] = None
_session_lock = threading.Lock()


def get_session() -> EditSession:
    global _session
    with _session_lock:
        if _session is None or _session.bank is not get_bank():
            _session = EditSession(get_bank())
        return _session


def reset_session() -> EditSession:
    global _session
    with _session_lock:
        _session = EditSession(get_bank())
        return _session

# services/vault/storage.py

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from errors import PersistenceReadError, PersistenceWriteError
from schemas.questions import Question

logger = logging.getLogger("dsa-vault.storage")

DEFAULT_SLOT = "dsaQuestions"
_BASE = Path(__file__).resolve().parent
_DEFAULT_FILE = _BASE / "data" / f"{DEFAULT_SLOT}.json"

_QUESTION_LIST = TypeAdapter(List[Question])


def encode_questions(questions: Sequence[Question]) -> str:
    # None optionals are omitted so "not provided" stays distinct from ""
    data = [q.model_dump(mode="json", by_alias=True, exclude_none=True) for q in questions]
    return json.dumps(data, ensure_ascii=False)


def decode_questions(raw: str) -> List[Question]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PersistenceReadError(f"stored blob is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise PersistenceReadError(f"stored blob root must be a list, got {type(data).__name__}")
    try:
        questions = _QUESTION_LIST.validate_python(data)
    except ValidationError as e:
        raise PersistenceReadError(
            f"stored blob failed schema coercion ({e.error_count()} errors)",
            {"errors": e.errors(include_url=False)},
        ) from e

    # timestamp-derived legacy ids can repeat; later copies get a fresh id
    seen = {q.id for q in questions}
    kept = set()
    for q in questions:
        if q.id in kept:
            new_id = uuid.uuid4().hex
            while new_id in seen:
                new_id = uuid.uuid4().hex
            logger.warning("Duplicate question id %s in stored blob; re-keyed as %s", q.id, new_id)
            q.id = new_id
            seen.add(new_id)
        kept.add(q.id)
    return questions


class QuestionStore:
    """
    Persistence adapter for the question collection.

    Subclasses only move raw blobs in and out of their slot; the codec and the
    "malformed means empty" policy live here.
    """

    name = "abstract"

    def __init__(self) -> None:
        self.load_error: Optional[PersistenceReadError] = None

    def read_raw(self) -> Optional[str]:
        raise NotImplementedError

    def write_raw(self, raw: str) -> None:
        raise NotImplementedError

    def load(self) -> List[Question]:
        try:
            raw = self.read_raw()
            questions = [] if raw is None else decode_questions(raw)
        except PersistenceReadError as e:
            self.load_error = e
            logger.error("Could not load questions from %s store, starting empty: %s", self.name, e)
            return []
        self.load_error = None
        return questions

    def save(self, questions: Sequence[Question]) -> None:
        self.write_raw(encode_questions(questions))


class MemoryStore(QuestionStore):
    name = "memory"

    def __init__(self, raw: Optional[str] = None) -> None:
        super().__init__()
        self.raw = raw

    def read_raw(self) -> Optional[str]:
        return self.raw

    def write_raw(self, raw: str) -> None:
        self.raw = raw


class JsonFileStore(QuestionStore):
    name = "file"

    def __init__(self, path: Path | str = _DEFAULT_FILE) -> None:
        super().__init__()
        self.path = Path(path)

    def read_raw(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadError(f"cannot read {self.path}: {e}") from e

    def write_raw(self, raw: str) -> None:
        # write a sibling temp file, then swap it in; readers see old or new, never half
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(raw)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write questions to %s: %s", self.path, e)
            raise PersistenceWriteError(f"cannot write {self.path}: {e}") from e


class SlotStore(QuestionStore):
    name = "db"

    def __init__(self, slot: str = DEFAULT_SLOT, session_factory=None) -> None:
        super().__init__()
        if session_factory is None:
            from db import SessionLocal

            session_factory = SessionLocal
        self.slot = slot
        self._session_factory = session_factory

    def read_raw(self) -> Optional[str]:
        from models import StorageSlot

        try:
            with self._session_factory() as db:
                row = db.get(StorageSlot, self.slot)
                return None if row is None else row.payload
        except SQLAlchemyError as e:
            raise PersistenceReadError(f"cannot read slot {self.slot!r}: {e}") from e

    def write_raw(self, raw: str) -> None:
        from models import StorageSlot

        with self._session_factory() as db:
            try:
                row = db.get(StorageSlot, self.slot)
                if row is None:
                    db.add(StorageSlot(name=self.slot, payload=raw))
                else:
                    row.payload = raw
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error("Failed to write slot %r: %s", self.slot, e)
                raise PersistenceWriteError(f"cannot write slot {self.slot!r}: {e}") from e


def store_from_env() -> QuestionStore:
    kind = os.getenv("VAULT_STORAGE", "db").strip().lower()
    if kind == "memory":
        return MemoryStore()
    if kind == "file":
        return JsonFileStore(os.getenv("VAULT_FILE") or _DEFAULT_FILE)
    if kind != "db":
        raise ValueError(f"unknown VAULT_STORAGE backend: {kind!r} (expected db, file or memory)")
    return SlotStore(os.getenv("VAULT_SLOT") or DEFAULT_SLOT)

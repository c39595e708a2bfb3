# services/vault/errors.py
from __future__ import annotations

from typing import Any, Dict, List, Optional


class VaultError(Exception):
    """
    Base class for every error the vault core raises.

    code:    short machine-readable identifier (e.g. "NOT_FOUND")
    message: human readable description
    details: extra context for logs / API responses
    """

    code = "VAULT_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(f"[{self.code}] {message}")


class ValidationError(VaultError):
    code = "VALIDATION"

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(
            f"Required fields are empty: {', '.join(self.fields)}",
            {"fields": self.fields},
        )


class NotFound(VaultError):
    code = "NOT_FOUND"

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"question not found: {question_id}", {"id": question_id})


class PersistenceReadError(VaultError):
    code = "STORAGE_READ"


class PersistenceWriteError(VaultError):
    code = "STORAGE_WRITE"


class SessionStateError(VaultError):
    code = "SESSION_STATE"

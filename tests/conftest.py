import os
import tempfile

# must run before db.py is imported anywhere
_TMP = tempfile.mkdtemp(prefix="dsa-vault-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP, "vault.db")
os.environ["VAULT_STORAGE"] = "db"
os.environ.pop("VAULT_SLOT", None)

import pytest  # noqa: E402

from bank import reset_bank  # noqa: E402
from db import SessionLocal, init_db  # noqa: E402
from edit_session import reset_session  # noqa: E402
from models import StorageSlot  # noqa: E402
from schemas.questions import Difficulty, QuestionFields  # noqa: E402

init_db()


@pytest.fixture(autouse=True)
def clean_vault():
    with SessionLocal() as db:
        db.query(StorageSlot).delete()
        db.commit()
    reset_bank()
    reset_session()
    yield


@pytest.fixture
def make_fields():
    def _make(title="Two Sum", difficulty=Difficulty.EASY, topic="Arrays", **kw):
        kw.setdefault("description", f"{title} description")
        return QuestionFields(title=title, difficulty=difficulty, topic=topic, **kw)

    return _make

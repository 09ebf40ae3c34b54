import os
import shutil
import sys
import tempfile
from pathlib import Path

import anyio
import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "apps" / "backend"))

# Settings are read once at import time, so point them at a scratch area first.
_TMP = Path(tempfile.mkdtemp(prefix="resumelink-tests-"))
os.environ["SYNC_DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["ASYNC_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP / 'test.db'}"
os.environ["STORAGE_ROOT"] = str(_TMP / "storage")
os.environ["LOG_DIR"] = str(_TMP / "logs")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["DB_AUTO_CREATE"] = "false"

USER = "user-1"
HEADERS = {"X-User-Id": USER}
PDF = b"%PDF-1.4\n%%EOF"


@pytest.fixture
def app():
    from resumelink.core import database, settings
    from resumelink.main import create_app
    from resumelink.models import Base

    shutil.rmtree(settings.STORAGE_ROOT, ignore_errors=True)
    anyio.run(database.init_models, Base, True)
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def rows():
    """Fresh-session lookup so reads never come from a stale identity map."""
    from sqlalchemy import select

    from resumelink.core import SessionLocal

    def _rows(model, **filters):
        with SessionLocal() as session:
            return list(session.scalars(select(model).filter_by(**filters)).all())

    return _rows


@pytest.fixture
def upload(client):
    def _upload(title="Jane Doe CV", filename="jane.pdf", data=PDF, user=USER):
        files = {"file": (filename, data, "application/pdf")}
        r = client.post(
            "/api/v1/resumes",
            files=files,
            data={"title": title},
            headers={"X-User-Id": user},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _upload

import asyncio
import logging

import pytest
from sqlalchemy.exc import SQLAlchemyError

from resumelink.exceptions import StoreError
from resumelink.repositories import wrap_store_errors


class _BrokenSession:
    async def rollback(self):
        raise SQLAlchemyError("connection lost")


class _Store:
    def __init__(self):
        self.session = _BrokenSession()

    @wrap_store_errors
    async def get(self, resume_id):
        raise SQLAlchemyError("no such table: resumes")

    @wrap_store_errors
    async def passthrough(self):
        raise StoreError("already wrapped")


def test_database_errors_become_store_errors():
    with pytest.raises(StoreError) as exc:
        asyncio.run(_Store().get("abc"))
    assert "get" in exc.value.message
    assert isinstance(exc.value.__cause__, SQLAlchemyError)


def test_failed_rollback_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="resumelink.repositories.base")

    with pytest.raises(StoreError):
        asyncio.run(_Store().get("abc"))

    assert any("rollback after get failed" in r.getMessage() for r in caplog.records)


def test_store_errors_pass_through_unchanged():
    with pytest.raises(StoreError) as exc:
        asyncio.run(_Store().passthrough())
    assert exc.value.message == "already wrapped"

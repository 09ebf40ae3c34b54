import asyncio

import pytest

from resumelink.exceptions import StorageConflictError, StoreError
from resumelink.storage import LocalBlobStorage


@pytest.fixture
def storage(tmp_path):
    return LocalBlobStorage(tmp_path, "http://cdn.example/")


def test_upload_and_url_round_trip(storage, tmp_path):
    asyncio.run(storage.upload("u1/abc-my cv.pdf", b"%PDF"))

    assert (tmp_path / "u1" / "abc-my cv.pdf").read_bytes() == b"%PDF"
    url = storage.public_url("u1/abc-my cv.pdf")
    assert url == "http://cdn.example/files/u1/abc-my%20cv.pdf"
    assert storage.path_from_url(url) == "u1/abc-my cv.pdf"


def test_existing_blob_is_never_overwritten(storage, tmp_path):
    asyncio.run(storage.upload("u1/a.pdf", b"first"))

    with pytest.raises(StorageConflictError):
        asyncio.run(storage.upload("u1/a.pdf", b"second"))
    assert (tmp_path / "u1" / "a.pdf").read_bytes() == b"first"


def test_paths_cannot_escape_root(storage):
    with pytest.raises(StoreError):
        asyncio.run(storage.upload("../outside.pdf", b"x"))


def test_remove_is_idempotent(storage, tmp_path):
    asyncio.run(storage.upload("u1/a.pdf", b"x"))
    asyncio.run(storage.remove("u1/a.pdf"))
    asyncio.run(storage.remove("u1/a.pdf"))
    assert not (tmp_path / "u1" / "a.pdf").exists()


def test_foreign_url_has_no_path(storage):
    assert storage.path_from_url("https://elsewhere.example/files/a.pdf") is None

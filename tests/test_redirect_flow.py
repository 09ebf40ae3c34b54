from conftest import HEADERS
from resumelink.core import settings
from resumelink.exceptions import StoreError
from resumelink.models import AnalyticsEvent, Resume
from resumelink.repositories import SqlEventLog, SqlResumeStore


async def _offline(self, *args, **kwargs):
    raise StoreError("offline")


def test_open_known_link_counts_one_view(upload, client, rows):
    res = upload(title="Jane Doe CV")

    r = client.get(f"/r/{res['shortId']}", headers={"user-agent": "pytest-browser"})

    assert r.status_code == 200
    assert "Jane Doe CV" in r.text
    assert res["fileUrl"] in r.text
    assert f"/r/{res['shortId']}/download" in r.text
    assert str(settings.OPEN_DELAY_SECONDS * 1000) in r.text

    (resume,) = rows(Resume, id=res["id"])
    assert resume.views == 1
    assert resume.downloads == 0
    (event,) = rows(AnalyticsEvent, resume_id=res["id"])
    assert event.event_type == "view"
    assert event.user_agent == "pytest-browser"
    assert event.ip_address is None


def test_open_link_as_json(upload, client):
    res = upload(title="Jane Doe CV")

    r = client.get(f"/r/{res['shortId']}", headers={"accept": "application/json"})

    assert r.status_code == 200
    assert r.json() == {
        "title": "Jane Doe CV",
        "fileUrl": res["fileUrl"],
        "shortId": res["shortId"],
        "downloads": 0,
    }


def test_unknown_link_is_404_and_writes_nothing(upload, client, rows):
    res = upload()

    r = client.get("/r/zzzz1")

    assert r.status_code == 404
    assert "Resume Not Found" in r.text
    assert rows(AnalyticsEvent) == []
    (resume,) = rows(Resume, id=res["id"])
    assert resume.views == 0


def test_download_redirects_to_file(upload, client, rows):
    res = upload()

    r = client.post(
        f"/r/{res['shortId']}/download",
        data={"downloads": "0"},
        follow_redirects=False,
    )

    assert r.status_code == 303
    assert r.headers["location"] == res["fileUrl"]
    (resume,) = rows(Resume, id=res["id"])
    assert resume.downloads == 1
    assert [e.event_type for e in rows(AnalyticsEvent)] == ["download"]


def test_download_of_unknown_link_is_404(client, rows):
    r = client.post("/r/zzzz1/download", follow_redirects=False)
    assert r.status_code == 404
    assert rows(AnalyticsEvent) == []


def test_download_still_redirects_when_tracking_fails(upload, client, rows, monkeypatch):
    res = upload()
    monkeypatch.setattr(SqlEventLog, "append", _offline)
    monkeypatch.setattr(SqlResumeStore, "increment", _offline)

    r = client.post(f"/r/{res['shortId']}/download", follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"] == res["fileUrl"]
    assert rows(AnalyticsEvent) == []


def test_view_counter_survives_event_log_failure(upload, client, rows, monkeypatch):
    res = upload()
    monkeypatch.setattr(SqlEventLog, "append", _offline)

    assert client.get(f"/r/{res['shortId']}").status_code == 200

    (resume,) = rows(Resume, id=res["id"])
    assert resume.views == 1
    assert rows(AnalyticsEvent) == []


def test_repeat_visits_accumulate(upload, client, rows):
    res = upload()

    for _ in range(3):
        client.get(f"/r/{res['shortId']}")
    client.post(f"/r/{res['shortId']}/download", follow_redirects=False)

    (resume,) = rows(Resume, id=res["id"])
    assert (resume.views, resume.downloads) == (3, 1)
    assert len(rows(AnalyticsEvent, event_type="view")) == 3

    r = client.get("/api/v1/resumes", headers=HEADERS)
    assert r.json()[0]["views"] == 3


def _set_downloads(resume_id, value):
    from resumelink.core import SessionLocal

    with SessionLocal() as session:
        session.get(Resume, resume_id).downloads = value
        session.commit()


def test_posted_counter_cannot_inflate_downloads(upload, client, rows, monkeypatch):
    monkeypatch.setattr(settings, "ATOMIC_COUNTERS", False)
    res = upload()

    r = client.post(
        f"/r/{res['shortId']}/download",
        data={"downloads": "999999"},
        follow_redirects=False,
    )

    assert r.status_code == 303
    (resume,) = rows(Resume, id=res["id"])
    assert resume.downloads == 1


def test_last_read_wins_uses_held_page_value(upload, client, rows, monkeypatch):
    monkeypatch.setattr(settings, "ATOMIC_COUNTERS", False)
    res = upload()
    _set_downloads(res["id"], 5)

    # a page rendered at downloads=2 overwrites with its held value plus one
    client.post(f"/r/{res['shortId']}/download", data={"downloads": "2"}, follow_redirects=False)
    (resume,) = rows(Resume, id=res["id"])
    assert resume.downloads == 3

    # without a posted value the one read at lookup is used
    client.post(f"/r/{res['shortId']}/download", follow_redirects=False)
    (resume,) = rows(Resume, id=res["id"])
    assert resume.downloads == 4
    assert len(rows(AnalyticsEvent, event_type="download")) == 2

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_roster_service
from app.config import Config
from app.main import app
from services.roster_service import RosterService
from tests.conftest import MemoryRosterRepository, sine_wav


def _files(clip, count=10, field="samples"):
    return [(field, (f"sample{i}.wav", clip, "audio/wav")) for i in range(count)]


@pytest.fixture
def service():
    return RosterService(repository=MemoryRosterRepository())


@pytest.fixture
def client(service):
    app.dependency_overrides[get_roster_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def low_clip():
    return sine_wav(440.0)


@pytest.fixture
def high_clip():
    return sine_wav(1800.0)


def _enroll(client, name, clip, count=10):
    return client.post("/roster/enroll", data={"name": name}, files=_files(clip, count))


def test_empty_roster(client):
    response = client.get("/roster")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 0
    assert body["status"] == "Ready"
    assert body["can_undo"] is False
    assert body["busy"] is False


def test_enroll_student(client, low_clip):
    response = _enroll(client, "Ada", low_clip)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "Enrolled Ada"
    assert body["roster"]["students"] == [
        {"position": 0, "name": "Ada", "stars": 0, "fingerprint_count": 10}
    ]


def test_enroll_with_too_few_samples_commits_nothing(client, low_clip):
    body = _enroll(client, "Ada", low_clip, count=6).json()
    assert body["success"] is False
    assert body["status"] == "Failed to record"
    assert body["roster"]["count"] == 0


def test_enroll_blank_name(client, low_clip):
    body = _enroll(client, "   ", low_clip).json()
    assert body["status"] == "Enter a name"


def test_award_star_identifies_speaker(client, low_clip, high_clip):
    _enroll(client, "Ada", low_clip)
    _enroll(client, "Bob", high_clip)

    response = client.post("/roster/award", files=[("sample", ("q.wav", high_clip, "audio/wav"))])
    body = response.json()
    assert body["status"] == "Star awarded to Bob"
    assert [s["stars"] for s in body["roster"]["students"]] == [0, 1]

    body = client.post("/roster/undo").json()
    assert body["status"] == "Undo complete"
    assert [s["stars"] for s in body["roster"]["students"]] == [0, 0]


def test_award_on_empty_roster(client, low_clip):
    body = client.post("/roster/award", files=[("sample", ("q.wav", low_clip, "audio/wav"))]).json()
    assert body["status"] == "No match found"


def test_award_without_audio(client, low_clip):
    _enroll(client, "Ada", low_clip)
    body = client.post("/roster/award").json()
    assert body["status"] == "Recording failed"


def test_star_buttons_drop_and_sort(client, low_clip, high_clip):
    _enroll(client, "Bob", high_clip)
    _enroll(client, "Ada", low_clip)

    assert client.post("/roster/1/stars/increment").json()["status"] == "Added a star to Ada"
    assert client.post("/roster/0/stars/decrement").json()["status"] == "Removed a star from Bob"

    sorted_body = client.get("/roster", params={"sort": "stars", "order": "desc"}).json()
    assert [s["name"] for s in sorted_body["students"]] == ["Ada", "Bob"]
    assert [s["position"] for s in sorted_body["students"]] == [1, 0]

    by_name = client.get("/roster", params={"sort": "name"}).json()
    assert [s["name"] for s in by_name["students"]] == ["Ada", "Bob"]

    assert client.delete("/roster/0").json()["status"] == "Dropped Bob"
    assert client.post("/roster/stars/reset").json()["status"] == "All stars cleared"


def test_re_enroll(client, low_clip, high_clip):
    _enroll(client, "Ada", low_clip)
    response = client.post("/roster/0/re-enroll", files=_files(high_clip))
    assert response.json()["status"] == "Re-recorded Ada"


def test_invalid_positions(client):
    assert client.post("/roster/4/stars/increment").json()["status"] == "No student at position 4"
    assert client.delete("/roster/-1").status_code == 422


def test_undo_with_empty_history(client):
    body = client.post("/roster/undo").json()
    assert body["success"] is False
    assert body["status"] == "Nothing to undo"


def test_unknown_sort_column_is_rejected(client):
    assert client.get("/roster", params={"sort": "fingerprints"}).status_code == 422


def test_busy_session_rejects_recording(low_clip):
    class BusyService(RosterService):
        @property
        def busy(self) -> bool:
            return True

    app.dependency_overrides[get_roster_service] = lambda: BusyService()
    try:
        client = TestClient(app)
        response = client.post("/roster/enroll", data={"name": "Ada"}, files=_files(low_clip))
        assert response.status_code == 409
        assert response.json() == {"error": "Recording already in progress"}
    finally:
        app.dependency_overrides.clear()


def test_oversized_upload(client, low_clip, monkeypatch):
    monkeypatch.setattr(Config, "MAX_AUDIO_BYTES", 1000)
    response = _enroll(client, "Ada", low_clip)
    assert response.status_code == 413
    assert "error" in response.json()


def test_health_and_metrics(client):
    health = client.get("/health").json()
    assert health["checks"]["session"]["identities"] == 0

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "roster_identities" in metrics.text


def test_metrics_report_app_version(client):
    assert f'version="{Config.APP_VERSION}"' in client.get("/metrics").text

from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from backend.database import get_session
from backend.models import Exercise, SetEntry, User, WorkoutEntry, WorkoutSession
from backend.routers.sessions import router
from backend.services.buckets import build_bucket_report
from backend.services.snapshot import ExerciseRecord, load_sessions


@pytest.fixture(name="client")
def client_fixture(session: Session):
    test_app = FastAPI()
    test_app.include_router(router, prefix="/api/users/{user_id}/sessions")
    test_app.dependency_overrides[get_session] = lambda: session
    return TestClient(test_app)


def _make_exercise(session: Session, user_id: int, name: str) -> int:
    ex = Exercise(user_id=user_id, name=name)
    session.add(ex)
    session.commit()
    session.refresh(ex)
    return ex.id


def _payload(exercise_id: int, date: str = "2024-01-15T18:00:00", **extra) -> dict:
    return {
        "date": date,
        "note": "Buena sesión",
        "entries": [
            {
                "exercise_id": exercise_id,
                "variant": "incline",
                "sets": [
                    {"weight": 40, "reps": 10, "is_warmup": True},
                    {"weight": 80, "reps": 5, "rir": 2},
                    {"weight": 82.5, "reps": 4, "rpe": 9},
                ],
            }
        ],
        **extra,
    }


# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------


def test_list_empty(client: TestClient, user_id: int):
    response = client.get(f"/api/users/{user_id}/sessions/")
    assert response.status_code == 200
    assert response.json() == []


def test_create(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    response = client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench))
    assert response.status_code == 201
    body = response.json()
    assert body["date"] == "2024-01-15T18:00:00"
    assert body["note"] == "Buena sesión"
    assert len(body["entries"]) == 1
    entry = body["entries"][0]
    assert entry["exercise_id"] == bench
    assert entry["variant"] == "incline"
    assert [s["weight"] for s in entry["sets"]] == [40, 80, 82.5]
    assert entry["sets"][0]["is_warmup"] is True
    assert entry["sets"][1]["rir"] == 2
    assert entry["sets"][1]["rpe"] is None
    assert entry["sets"][2]["rpe"] == 9


def test_create_in_pounds_stores_kg(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    payload = {
        "date": "2024-01-15T18:00:00",
        "unit": "lb",
        "entries": [{"exercise_id": bench, "sets": [{"weight": 220.462, "reps": 5}]}],
    }
    client.post(f"/api/users/{user_id}/sessions/", json=payload)
    stored = session.exec(select(SetEntry)).one()
    assert stored.weight == pytest.approx(100.0)


def test_create_without_date_defaults_to_now(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    payload = _payload(bench)
    del payload["date"]
    response = client.post(f"/api/users/{user_id}/sessions/", json=payload)
    assert response.status_code == 201
    assert response.json()["date"]


def test_create_requires_entries(client: TestClient, user_id: int):
    response = client.post(f"/api/users/{user_id}/sessions/", json={"entries": []})
    assert response.status_code == 400


def test_create_unknown_exercise(client: TestClient, user_id: int):
    response = client.post(f"/api/users/{user_id}/sessions/", json=_payload(9999))
    assert response.status_code == 400


@pytest.mark.parametrize(
    "bad_set",
    [
        {"weight": -5, "reps": 5},
        {"weight": 80, "reps": -1},
        {"weight": 80, "reps": 5, "rir": 11},
        {"weight": 80, "reps": 5, "rpe": 0},
    ],
)
def test_create_validates_sets(client: TestClient, session: Session, user_id: int, bad_set: dict):
    bench = _make_exercise(session, user_id, "Press de Banca")
    payload = {"entries": [{"exercise_id": bench, "sets": [bad_set]}]}
    response = client.post(f"/api/users/{user_id}/sessions/", json=payload)
    assert response.status_code == 422


def test_list_newest_first(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench, "2024-01-01T18:00:00"))
    client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench, "2024-02-01T18:00:00"))
    dates = [s["date"] for s in client.get(f"/api/users/{user_id}/sessions/").json()]
    assert dates == ["2024-02-01T18:00:00", "2024-01-01T18:00:00"]


def test_get_one(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    created = client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench)).json()
    response = client.get(f"/api/users/{user_id}/sessions/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_other_users_session(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    created = client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench)).json()
    other = User(name="Bo")
    session.add(other)
    session.commit()
    session.refresh(other)
    assert client.get(f"/api/users/{other.id}/sessions/{created['id']}").status_code == 404


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def test_delete_session_cascades(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    created = client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench)).json()

    response = client.delete(f"/api/users/{user_id}/sessions/{created['id']}")
    assert response.status_code == 204
    assert session.exec(select(WorkoutSession)).all() == []
    assert session.exec(select(WorkoutEntry)).all() == []
    assert session.exec(select(SetEntry)).all() == []


def test_delete_unknown_session(client: TestClient, user_id: int):
    assert client.delete(f"/api/users/{user_id}/sessions/9999").status_code == 404


def test_delete_entry_keeps_session_with_other_entries(
    client: TestClient, session: Session, user_id: int
):
    bench = _make_exercise(session, user_id, "Press de Banca")
    squat = _make_exercise(session, user_id, "Sentadilla (Squat)")
    payload = {
        "date": "2024-01-15T18:00:00",
        "entries": [
            {"exercise_id": bench, "sets": [{"weight": 80, "reps": 5}]},
            {"exercise_id": squat, "sets": [{"weight": 100, "reps": 5}]},
        ],
    }
    created = client.post(f"/api/users/{user_id}/sessions/", json=payload).json()
    entry_id = created["entries"][0]["id"]

    response = client.delete(f"/api/users/{user_id}/sessions/{created['id']}/entries/{entry_id}")
    assert response.status_code == 204

    remaining = client.get(f"/api/users/{user_id}/sessions/{created['id']}").json()
    assert [e["exercise_id"] for e in remaining["entries"]] == [squat]


def test_delete_last_entry_deletes_session(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    created = client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench)).json()
    entry_id = created["entries"][0]["id"]

    client.delete(f"/api/users/{user_id}/sessions/{created['id']}/entries/{entry_id}")
    assert client.get(f"/api/users/{user_id}/sessions/{created['id']}").status_code == 404
    assert session.exec(select(SetEntry)).all() == []


def test_delete_entry_of_other_session(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    first = client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench)).json()
    second = client.post(f"/api/users/{user_id}/sessions/", json=_payload(bench)).json()
    entry_id = first["entries"][0]["id"]
    response = client.delete(f"/api/users/{user_id}/sessions/{second['id']}/entries/{entry_id}")
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Session dates
# ---------------------------------------------------------------------------


def test_dates_are_stored_as_wall_clock(client: TestClient, session: Session, user_id: int):
    bench = _make_exercise(session, user_id, "Press de Banca")
    undated = _payload(bench)
    del undated["date"]
    before = datetime.now().replace(microsecond=0)
    assert client.post(f"/api/users/{user_id}/sessions/", json=undated).status_code == 201

    late = client.post(
        f"/api/users/{user_id}/sessions/", json=_payload(bench, "2024-01-15T23:30:00-05:00")
    )
    assert late.status_code == 201
    assert late.json()["date"] == "2024-01-15T23:30:00"

    stored = session.get(WorkoutSession, late.json()["id"])
    assert stored.date == datetime(2024, 1, 15, 23, 30)
    assert stored.date.tzinfo is None

    records = load_sessions(user_id, session)
    assert records[0].date >= before
    report = build_bucket_report(ExerciseRecord(id=bench, name="Press de Banca"), records, "day")
    assert report.rows[-1].key == "2024-01-15"

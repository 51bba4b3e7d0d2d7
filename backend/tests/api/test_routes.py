"""
Tests for the REST routes.

Requests go through the ASGI app with the session dependency pointed at
the temporary test database. Error responses carry a stable code.
"""

import gpxpy
import pytest
from httpx import ASGITransport, AsyncClient

from survey_api.api.errors import status_code_for
from survey_api.db.session import get_async_db
from survey_api.main import app
from survey_api.shared.errors import (
    AuthorizationError,
    ConflictError,
    DuplicateNameError,
    InvalidStatusError,
    NoActiveTrackError,
    NotFoundError,
    SurveyError,
    ValidationError,
)


ALICE = {"X-User-ID": "alice"}
BOB = {"X-User-ID": "bob"}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
async def client(session_factory):
    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def create_project(client, name="Delta", headers=ALICE) -> dict:
    response = await client.post("/api/v1/projects", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()


# =============================================================================
# Test Error Mapping
# =============================================================================

class TestStatusCodes:
    """Tests for status_code_for."""

    @pytest.mark.parametrize("error, expected", [
        (ValidationError("x"), 400),
        (InvalidStatusError("x"), 400),
        (AuthorizationError("x"), 403),
        (NotFoundError("x"), 404),
        (ConflictError("x"), 409),
        (DuplicateNameError("x"), 409),
        (NoActiveTrackError("x"), 409),
        (SurveyError("x"), 500),
    ])
    def test_mapping(self, error, expected):
        assert status_code_for(error) == expected


class TestHealth:

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_identity_required(self, client):
        response = await client.get("/api/v1/projects")
        assert response.status_code == 422


# =============================================================================
# Test Projects
# =============================================================================

class TestProjectRoutes:
    """Tests for /api/v1/projects."""

    async def test_create_and_list(self, client):
        created = await create_project(client)
        assert created["status"] == "paused"
        assert created["elapsed_seconds"] == 0

        response = await client.get("/api/v1/projects", headers=ALICE)
        assert [p["id"] for p in response.json()] == [created["id"]]

        response = await client.get("/api/v1/projects", headers=BOB)
        assert response.json() == []

    async def test_duplicate_name(self, client):
        await create_project(client, "Delta")
        response = await client.post("/api/v1/projects", json={"name": "delta"}, headers=ALICE)
        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_name"

    async def test_blank_name(self, client):
        response = await client.post("/api/v1/projects", json={"name": " "}, headers=ALICE)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    async def test_play_and_active(self, client):
        project = await create_project(client)
        response = await client.put(
            f"/api/v1/projects/{project['id']}/status",
            json={"status": "playing"},
            headers=ALICE,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "playing"
        assert response.json()["started_at"] is not None

        response = await client.get("/api/v1/projects/active", headers=ALICE)
        assert response.json()["project"]["id"] == project["id"]

        response = await client.get("/api/v1/projects/active", headers=BOB)
        assert response.json() == {"project": None}

    async def test_second_play_pauses_first(self, client):
        first = await create_project(client, "First")
        second = await create_project(client, "Second")
        for project in (first, second):
            await client.put(
                f"/api/v1/projects/{project['id']}/status",
                json={"status": "playing"},
                headers=ALICE,
            )

        response = await client.get(f"/api/v1/projects/{first['id']}", headers=ALICE)
        assert response.json()["status"] == "paused"

    async def test_invalid_status(self, client):
        project = await create_project(client)
        response = await client.put(
            f"/api/v1/projects/{project['id']}/status",
            json={"status": "sleeping"},
            headers=ALICE,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_status"

    async def test_status_of_other_users_project(self, client):
        project = await create_project(client)
        response = await client.put(
            f"/api/v1/projects/{project['id']}/status",
            json={"status": "playing"},
            headers=BOB,
        )
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    async def test_leave_ended(self, client):
        project = await create_project(client)
        url = f"/api/v1/projects/{project['id']}/status"
        await client.put(url, json={"status": "ended"}, headers=ALICE)
        response = await client.put(url, json={"status": "playing"}, headers=ALICE)
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"

    async def test_heartbeat(self, client):
        project = await create_project(client)
        await client.put(
            f"/api/v1/projects/{project['id']}/status",
            json={"status": "playing"},
            headers=ALICE,
        )
        response = await client.post(
            f"/api/v1/projects/{project['id']}/heartbeat", headers=ALICE
        )
        assert response.status_code == 200
        assert response.json()["last_activity"] is not None

    async def test_get_other_users_project(self, client):
        project = await create_project(client)
        response = await client.get(f"/api/v1/projects/{project['id']}", headers=BOB)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_detail_includes_waypoints(self, client):
        project = await create_project(client)
        await client.post(
            "/api/v1/waypoints",
            json={"name": "Outflow", "latitude": 45.1, "longitude": 29.6,
                  "project_id": project["id"]},
            headers=ALICE,
        )
        response = await client.get(f"/api/v1/projects/{project['id']}", headers=ALICE)
        body = response.json()
        assert [w["name"] for w in body["waypoints"]] == ["Outflow"]
        assert body["waypoints"][0]["project_name"] == "Delta"

    async def test_delete(self, client):
        project = await create_project(client)
        response = await client.delete(f"/api/v1/projects/{project['id']}", headers=ALICE)
        assert response.status_code == 204
        response = await client.get(f"/api/v1/projects/{project['id']}", headers=ALICE)
        assert response.status_code == 404


# =============================================================================
# Test Tracks
# =============================================================================

class TestTrackRoutes:
    """Tests for /api/v1/tracks."""

    async def test_recording_flow(self, client):
        project = await create_project(client)
        project_id = project["id"]

        response = await client.post("/api/v1/tracks", json={"project_id": project_id}, headers=ALICE)
        assert response.status_code == 201
        track_id = response.json()["id"]

        points = [
            {"lat": 45.0, "lng": 29.0, "elevation": 2.0, "recorded_at": "2026-03-01T09:00:00Z"},
            {"lat": 45.001, "lng": 29.0, "elevation": 2.5, "recorded_at": "2026-03-01T09:00:05Z"},
            {"lat": 45.002, "lng": 29.0, "elevation": 3.0, "recorded_at": "2026-03-01T09:00:10Z"},
        ]
        response = await client.post(
            "/api/v1/tracks/points",
            json={"project_id": project_id, "points": points},
            headers=ALICE,
        )
        assert response.status_code == 200
        assert response.json() == {"saved_count": 3, "track_id": track_id, "point_count": 3}

        response = await client.get(f"/api/v1/tracks/project/{project_id}/active", headers=ALICE)
        assert response.json()["id"] == track_id

        response = await client.put("/api/v1/tracks/end", json={"project_id": project_id}, headers=ALICE)
        assert response.status_code == 200
        summary = response.json()
        assert summary["is_active"] is False
        assert summary["total_duration"] == 10
        assert 200 < summary["total_distance"] < 250

        response = await client.get(f"/api/v1/projects/{project_id}/distance", headers=ALICE)
        assert response.json()["total_distance"] == summary["total_distance"]
        assert response.json()["track_count"] == 1

        response = await client.get(f"/api/v1/tracks/project/{project_id}/points", headers=ALICE)
        assert [p["lat"] for p in response.json()] == [45.0, 45.001, 45.002]

        response = await client.get(f"/api/v1/tracks/project/{project_id}", headers=ALICE)
        assert [t["id"] for t in response.json()] == [track_id]

    async def test_points_without_track(self, client):
        project = await create_project(client)
        response = await client.post(
            "/api/v1/tracks/points",
            json={"project_id": project["id"], "points": [{"lat": 1.0, "lng": 2.0}]},
            headers=ALICE,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "no_active_track"

    async def test_empty_batch(self, client):
        project = await create_project(client)
        await client.post("/api/v1/tracks", json={"project_id": project["id"]}, headers=ALICE)
        response = await client.post(
            "/api/v1/tracks/points",
            json={"project_id": project["id"], "points": []},
            headers=ALICE,
        )
        assert response.status_code == 400

    async def test_out_of_range_point(self, client):
        project = await create_project(client)
        response = await client.post(
            "/api/v1/tracks/points",
            json={"project_id": project["id"], "points": [{"lat": 91.0, "lng": 0.0}]},
            headers=ALICE,
        )
        assert response.status_code == 422

    async def test_start_on_other_users_project(self, client):
        project = await create_project(client)
        response = await client.post("/api/v1/tracks", json={"project_id": project["id"]}, headers=BOB)
        assert response.status_code == 403

    async def test_gpx_download(self, client):
        project = await create_project(client, "Delta & Co")
        project_id = project["id"]
        await client.post("/api/v1/tracks", json={"project_id": project_id}, headers=ALICE)
        await client.post(
            "/api/v1/tracks/points",
            json={"project_id": project_id, "points": [
                {"lat": 45.0, "lng": 29.0, "accuracy": 3.0},
                {"lat": 45.001, "lng": 29.0, "accuracy": 4.0},
            ]},
            headers=ALICE,
        )

        response = await client.get(f"/api/v1/tracks/project/{project_id}/gpx", headers=ALICE)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/gpx+xml")
        assert "attachment" in response.headers["content-disposition"]
        assert "Delta___Co.gpx" in response.headers["content-disposition"]

        gpx = gpxpy.parse(response.text)
        assert gpx.tracks[0].name == "Delta & Co"
        assert gpx.get_track_points_no() == 2

    async def test_gpx_other_user(self, client):
        project = await create_project(client)
        response = await client.get(f"/api/v1/tracks/project/{project['id']}/gpx", headers=BOB)
        assert response.status_code == 404


# =============================================================================
# Test Waypoints
# =============================================================================

class TestWaypointRoutes:
    """Tests for /api/v1/waypoints."""

    async def test_crud(self, client):
        response = await client.post(
            "/api/v1/waypoints",
            json={"name": "Reed bed", "latitude": 45.2, "longitude": 29.7,
                  "images": [{"url": "https://img.example/reed.jpg"}]},
            headers=ALICE,
        )
        assert response.status_code == 201
        waypoint = response.json()
        assert waypoint["images"][0]["url"] == "https://img.example/reed.jpg"

        response = await client.get(f"/api/v1/waypoints/{waypoint['id']}", headers=ALICE)
        assert response.json()["name"] == "Reed bed"

        response = await client.put(
            f"/api/v1/waypoints/{waypoint['id']}", json={"notes": "Nesting"}, headers=ALICE
        )
        assert response.json()["notes"] == "Nesting"

        response = await client.put(
            f"/api/v1/waypoints/{waypoint['id']}", json={"notes": "x"}, headers=BOB
        )
        assert response.status_code == 403

        response = await client.delete(f"/api/v1/waypoints/{waypoint['id']}", headers=ALICE)
        assert response.status_code == 200
        assert response.json()["id"] == waypoint["id"]

        response = await client.get(f"/api/v1/waypoints/{waypoint['id']}", headers=ALICE)
        assert response.status_code == 404

    async def test_list_filtered_by_project(self, client):
        project = await create_project(client)
        await client.post(
            "/api/v1/waypoints",
            json={"name": "In", "latitude": 1.0, "longitude": 1.0, "project_id": project["id"]},
            headers=ALICE,
        )
        await client.post(
            "/api/v1/waypoints",
            json={"name": "Out", "latitude": 1.0, "longitude": 1.0},
            headers=ALICE,
        )
        response = await client.get(
            "/api/v1/waypoints", params={"project_id": project["id"]}, headers=ALICE
        )
        assert [w["name"] for w in response.json()] == ["In"]

    async def test_activity_clears_auto_pause_flag(self, client):
        """Creating a waypoint refreshes the project's last activity."""
        project = await create_project(client)
        await client.post(
            "/api/v1/waypoints",
            json={"name": "Pin", "latitude": 1.0, "longitude": 1.0, "project_id": project["id"]},
            headers=ALICE,
        )
        response = await client.get(f"/api/v1/projects/{project['id']}", headers=ALICE)
        assert response.json()["last_activity"] is not None
        assert response.json()["auto_paused"] is False

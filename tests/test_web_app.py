"""Mini README: Tests for the budget desk HTTP API.

Exercises the JSON routes end to end against a temporary database:
project and position CRUD with partial updates, reordering, the derived
calculation and comparison views, CSV export and the HTML overview.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def _seed_project(client: TestClient) -> dict:
    project = client.post("/api/projects", json={"name": "Musikvideo"}).json()
    client.put(
        f"/api/projects/{project['id']}",
        json={"shooting_days": 5, "hotel_cost_per_night": 80, "per_diem": 20, "actual_per_diem": 90},
    )
    crew = client.post(f"/api/projects/{project['id']}/positions", json={"type": "crew"}).json()
    client.put(
        f"/api/positions/{crew['id']}",
        json={"name": "Kamera", "daily_rate": 300, "hotel_nights": 2, "travel_costs": 50, "actual_costs": 1600},
    )
    location = client.post(f"/api/projects/{project['id']}/positions", json={"type": "location"}).json()
    client.put(f"/api/positions/{location['id']}", json={"name": "Studio", "costs": 450, "actual_costs": 500})
    return {"project": project, "crew": crew, "location": location}


def test_create_and_fetch_project(client: TestClient) -> None:
    created = client.post("/api/projects", json={}).json()

    response = client.get(f"/api/projects/{created['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Neues Projekt"
    assert response.json()["positions"] == []
    assert client.get("/api/projects/does-not-exist").status_code == 404


def test_project_update_only_touches_sent_fields(client: TestClient) -> None:
    project = client.post("/api/projects", json={"name": "Doku"}).json()

    response = client.put(f"/api/projects/{project['id']}", json={"per_diem": 25})

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Doku"
    assert body["per_diem"] == pytest.approx(25.0)
    assert client.put(f"/api/projects/{project['id']}", json={"shooting_days": 0}).status_code == 422
    assert client.put(f"/api/projects/{project['id']}", json={"name": None}).status_code == 400
    assert client.put("/api/projects/missing", json={"name": "x"}).status_code == 404


def test_archive_moves_project_between_lists(client: TestClient) -> None:
    project = client.post("/api/projects", json={"name": "Archivkandidat"}).json()

    client.put(f"/api/projects/{project['id']}", json={"archived": True})

    assert client.get("/api/projects").json() == []
    archived = client.get("/api/projects", params={"archived": "true"}).json()
    assert [entry["id"] for entry in archived] == [project["id"]]


def test_position_type_must_be_known(client: TestClient) -> None:
    project = client.post("/api/projects", json={}).json()

    response = client.post(f"/api/projects/{project['id']}/positions", json={"type": "catering"})

    assert response.status_code == 422
    missing = client.post("/api/projects/missing/positions", json={"type": "crew"})
    assert missing.status_code == 404


def test_calculation_view(client: TestClient) -> None:
    seeded = _seed_project(client)
    project_id = seeded["project"]["id"]

    body = client.get(f"/api/projects/{project_id}/calculation").json()

    assert body["summary"]["crew"] == pytest.approx(1600.0)
    assert body["summary"]["hotel"] == pytest.approx(160.0)
    assert body["summary"]["location"] == pytest.approx(450.0)
    assert body["summary"]["total"] == pytest.approx(2260.0)
    assert body["hotel_nights"] == 2
    assert body["position_sums"][seeded["crew"]["id"]] == pytest.approx(1810.0)


def test_comparison_view(client: TestClient) -> None:
    seeded = _seed_project(client)
    project_id = seeded["project"]["id"]

    body = client.get(f"/api/projects/{project_id}/comparison").json()

    rows = {row["type"]: row for row in body["rows"]}
    assert rows["crew"]["calculated"] == pytest.approx(1710.0)
    assert rows["crew"]["difference"] == pytest.approx(110.0)
    assert rows["location"]["difference"] == pytest.approx(-50.0)
    assert rows["verpflegung"]["calculated"] == pytest.approx(100.0)
    assert rows["verpflegung"]["actual"] == pytest.approx(90.0)
    assert body["total_calculated"] == pytest.approx(2260.0)
    assert body["total_actual"] == pytest.approx(2190.0)
    assert body["difference"] == pytest.approx(70.0)


def test_inactive_position_drops_out_of_comparison(client: TestClient) -> None:
    seeded = _seed_project(client)
    project_id = seeded["project"]["id"]

    client.put(f"/api/positions/{seeded['location']['id']}", json={"active": False})

    body = client.get(f"/api/projects/{project_id}/comparison").json()
    assert "location" not in {row["type"] for row in body["rows"]}
    assert body["total_calculated"] == pytest.approx(1810.0)


def test_reorder_and_delete_positions(client: TestClient) -> None:
    seeded = _seed_project(client)
    project_id = seeded["project"]["id"]
    crew_id, location_id = seeded["crew"]["id"], seeded["location"]["id"]

    response = client.put(
        f"/api/projects/{project_id}/reorder",
        json={"positions": [{"id": location_id, "type": "location"}, {"id": crew_id}]},
    )
    assert response.json() == {"success": True}
    order = [position["id"] for position in client.get(f"/api/projects/{project_id}").json()["positions"]]
    assert order == [location_id, crew_id]

    assert client.delete(f"/api/positions/{crew_id}").json() == {"success": True}
    remaining = client.get(f"/api/projects/{project_id}").json()["positions"]
    assert [position["id"] for position in remaining] == [location_id]
    assert client.delete(f"/api/positions/{crew_id}").status_code == 404


def test_delete_project_removes_everything(client: TestClient) -> None:
    seeded = _seed_project(client)
    project_id = seeded["project"]["id"]

    assert client.delete(f"/api/projects/{project_id}").json() == {"success": True}

    assert client.get(f"/api/projects/{project_id}").status_code == 404
    assert client.put(f"/api/positions/{seeded['crew']['id']}", json={"name": "x"}).status_code == 404


def test_csv_export(client: TestClient) -> None:
    seeded = _seed_project(client)
    project_id = seeded["project"]["id"]

    response = client.get(f"/api/projects/{project_id}/export.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "Crew;Kamera;ja;1.810,00;1.710,00;1.600,00;110,00" in response.text
    assert "Gesamt;2.260,00" in response.text


def test_dashboard_lists_active_projects(client: TestClient) -> None:
    _seed_project(client)

    response = client.get("/")

    assert response.status_code == 200
    assert "Musikvideo" in response.text
    assert "2.260,00 €" in response.text


def test_non_finite_amounts_are_refused(client: TestClient) -> None:
    """JSON ``Infinity`` never reaches the database."""

    seeded = _seed_project(client)
    location_id = seeded["location"]["id"]

    response = client.put(
        f"/api/positions/{location_id}",
        content='{"costs": Infinity}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 422
    project = client.get(f"/api/projects/{seeded['project']['id']}").json()
    stored = {position["id"]: position for position in project["positions"]}
    assert stored[location_id]["costs"] == pytest.approx(450.0)


def test_overflowing_totals_are_rolled_back(client: TestClient) -> None:
    """A rate that only overflows once multiplied by the shooting days answers 400."""

    seeded = _seed_project(client)
    project_id = seeded["project"]["id"]

    response = client.put(f"/api/positions/{seeded['crew']['id']}", json={"daily_rate": 1e308})

    assert response.status_code == 400
    calculation = client.get(f"/api/projects/{project_id}/calculation")
    assert calculation.status_code == 200
    assert calculation.json()["summary"]["total"] == pytest.approx(2260.0)
    huge_per_diem = client.put(f"/api/projects/{project_id}", json={"per_diem": 1e308})
    assert huge_per_diem.status_code == 400
    assert client.get(f"/api/projects/{project_id}").json()["per_diem"] == pytest.approx(20.0)

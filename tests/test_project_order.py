"""
Manual project reordering: PATCH /api/projects/order and the timestamp math.
"""

from datetime import datetime, timedelta
from unittest.mock import patch

from showcase.core.database import db
from showcase.core.models import Project
from showcase.modules.projects.database import compute_reorder_timestamps

DAY1_MORNING = datetime(2024, 1, 1, 10, 0)
DAY1_NOON = datetime(2024, 1, 1, 12, 0)
DAY2 = datetime(2024, 1, 2, 12, 0)


def _add_projects(app, created):
    """created: {title: created_at}. Returns {title: id}."""
    with app.app_context():
        ids = {}
        for title, created_at in created.items():
            project = Project(title=title, created_at=created_at)
            db.session.add(project)
            db.session.flush()
            ids[title] = project.id
        db.session.commit()
        return ids


def _listed_titles(client):
    return [p["title"] for p in client.get("/api/projects").get_json()]


# ---------------------------------------------------------------------------
# 1. Validation
# ---------------------------------------------------------------------------

def test_order_requires_admin(client):
    response = client.patch("/api/projects/order", json={"ordered_ids": ["a"]})
    assert response.status_code == 401


def test_order_rejects_missing_or_empty_list(admin_client):
    for body in ({}, {"ordered_ids": "not-a-list"}, {"ordered_ids": []}):
        response = admin_client.patch("/api/projects/order", json=body)
        assert response.status_code == 400
        assert response.get_json() == {
            "error": "ordered_ids must be a non-empty array of project IDs"
        }


def test_order_rejects_only_invalid_ids(admin_client):
    response = admin_client.patch("/api/projects/order", json={"ordered_ids": [" ", 1, None]})
    assert response.status_code == 400
    assert response.get_json() == {
        "error": "ordered_ids must contain at least one valid project ID"
    }


# ---------------------------------------------------------------------------
# 2. Reordering
# ---------------------------------------------------------------------------

def test_reorder_within_day_ignores_unknown_ids(app, admin_client):
    ids = _add_projects(app, {"a": DAY1_NOON, "b": DAY1_MORNING, "c": DAY2})
    assert _listed_titles(admin_client) == ["c", "a", "b"]

    response = admin_client.patch("/api/projects/order", json={
        "ordered_ids": [ids["c"], ids["b"], ids["a"], "non-existent"],
    })

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    assert _listed_titles(admin_client) == ["c", "b", "a"]

    with app.app_context():
        b = db.session.get(Project, ids["b"])
        a = db.session.get(Project, ids["a"])
        assert b.created_at == DAY1_NOON
        assert a.created_at == DAY1_NOON - timedelta(milliseconds=1)


def test_reorder_never_moves_projects_across_days(app, admin_client):
    ids = _add_projects(app, {"a": DAY1_NOON, "c": DAY2})

    admin_client.patch("/api/projects/order", json={"ordered_ids": [ids["a"], ids["c"]]})

    with app.app_context():
        assert db.session.get(Project, ids["a"]).created_at.date() == DAY1_NOON.date()
        assert db.session.get(Project, ids["c"]).created_at.date() == DAY2.date()
    assert _listed_titles(admin_client) == ["c", "a"]


def test_reorder_database_error(app, admin_client):
    ids = _add_projects(app, {"a": DAY1_NOON})
    with patch("showcase.modules.projects.routes.reorder_projects_db",
               side_effect=RuntimeError("DB error")):
        response = admin_client.patch("/api/projects/order", json={"ordered_ids": [ids["a"]]})

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to update project order"}


# ---------------------------------------------------------------------------
# 3. Timestamp math
# ---------------------------------------------------------------------------

def test_compute_timestamps_strictly_decreasing_per_day():
    created = {"a": DAY1_MORNING, "b": DAY1_NOON, "c": DAY2}
    updates = compute_reorder_timestamps(["c", "a", "b"], created)

    assert [pid for pid, _ in updates] == ["c", "a", "b"]
    times = dict(updates)
    assert times["c"] == DAY2
    assert times["a"] == DAY1_NOON
    assert times["b"] == DAY1_NOON - timedelta(milliseconds=1)


def test_compute_timestamps_stay_inside_day_near_midnight():
    midnight = datetime(2024, 3, 5, 0, 0, 0)
    created = {"x": midnight, "y": midnight, "z": midnight}
    updates = dict(compute_reorder_timestamps(["x", "y", "z"], created))

    assert updates["x"] > updates["y"] > updates["z"]
    assert all(t.date() == midnight.date() for t in updates.values())


def test_compute_timestamps_skips_unknown_and_duplicates():
    updates = compute_reorder_timestamps(["a", "ghost", "a"], {"a": DAY1_NOON})
    assert updates == [("a", DAY1_NOON)]

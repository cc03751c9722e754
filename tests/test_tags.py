"""
Tags API and tag resolution helpers.
"""

from showcase.core.database import db
from showcase.core.models import Project, ProjectTag, Tag
from showcase.modules.tags.database import parse_tag_names, resolve_tag_names_to_ids


def _create_tag(client, name):
    return client.post("/api/tags", json={"name": name})


# ---------------------------------------------------------------------------
# 1. Helpers
# ---------------------------------------------------------------------------

def test_parse_tag_names():
    assert parse_tag_names('[" Outdoor ", "", 3, "Deck"]') == ["Outdoor", "Deck"]
    assert parse_tag_names("not json") == []
    assert parse_tag_names('{"a": 1}') == []
    assert parse_tag_names(None) == []


def test_resolve_tag_names_creates_and_reuses(app):
    with app.app_context():
        existing = Tag(name="Outdoor")
        db.session.add(existing)
        db.session.commit()
        existing_id = existing.id

        ids = resolve_tag_names_to_ids(["outdoor", " Deck ", "DECK", "", "Outdoor"])
        db.session.commit()

        assert len(ids) == 2
        assert ids[0] == existing_id
        assert db.session.get(Tag, ids[1]).name == "Deck"
        assert Tag.query.count() == 2


def test_resolve_tag_names_empty(app):
    with app.app_context():
        assert resolve_tag_names_to_ids([]) == []
        assert resolve_tag_names_to_ids(["  "]) == []


# ---------------------------------------------------------------------------
# 2. Public listing
# ---------------------------------------------------------------------------

def test_list_tags_with_project_counts(app, client):
    with app.app_context():
        deck, bath = Tag(name="Deck"), Tag(name="Bath")
        project = Project(title="Porch")
        db.session.add_all([deck, bath, project])
        db.session.flush()
        db.session.add(ProjectTag(project_id=project.id, tag_id=deck.id))
        db.session.commit()

    data = client.get("/api/tags").get_json()

    assert [t["name"] for t in data] == ["Bath", "Deck"]
    assert {t["name"]: t["project_count"] for t in data} == {"Bath": 0, "Deck": 1}


# ---------------------------------------------------------------------------
# 3. Admin CRUD
# ---------------------------------------------------------------------------

def test_create_tag(admin_client):
    response = _create_tag(admin_client, "  Outdoor ")
    assert response.status_code == 201
    assert response.get_json()["name"] == "Outdoor"


def test_create_tag_requires_name(admin_client):
    for body in ({}, {"name": ""}, {"name": "   "}, {"name": 7}):
        response = admin_client.post("/api/tags", json=body)
        assert response.status_code == 400
        assert response.get_json() == {"error": "Name is required"}


def test_create_tag_duplicate_case_insensitive(admin_client):
    _create_tag(admin_client, "Outdoor")
    response = _create_tag(admin_client, "OUTDOOR")
    assert response.status_code == 409
    assert response.get_json() == {"error": "A tag with that name already exists"}


def test_create_tag_duplicate_non_ascii(admin_client):
    assert _create_tag(admin_client, "Éclat").status_code == 201
    response = _create_tag(admin_client, "ÉCLAT")
    assert response.status_code == 409


def test_resolve_tag_names_reuses_non_ascii_tag(app):
    with app.app_context():
        first = resolve_tag_names_to_ids(["Straße"])
        db.session.commit()
        assert resolve_tag_names_to_ids(["STRASSE", "straße"]) == first
        assert Tag.query.count() == 1


def test_create_tag_requires_admin(client, sign_in):
    sign_in(email="viewer@example.com", is_admin=False)
    assert _create_tag(client, "Outdoor").status_code == 403


def test_rename_tag(admin_client):
    tag_id = _create_tag(admin_client, "Outdoor").get_json()["id"]

    response = admin_client.patch(f"/api/tags/{tag_id}", json={"name": "Outdoors"})
    assert response.status_code == 200
    assert response.get_json() == {"id": tag_id, "name": "Outdoors"}


def test_rename_tag_case_only_change(admin_client):
    tag_id = _create_tag(admin_client, "outdoor").get_json()["id"]
    response = admin_client.patch(f"/api/tags/{tag_id}", json={"name": "Outdoor"})
    assert response.status_code == 200


def test_rename_tag_conflict_and_missing(admin_client):
    _create_tag(admin_client, "Deck")
    tag_id = _create_tag(admin_client, "Bath").get_json()["id"]

    assert admin_client.patch(f"/api/tags/{tag_id}", json={"name": "deck"}).status_code == 409
    assert admin_client.patch(f"/api/tags/{tag_id}", json={"name": ""}).status_code == 400
    response = admin_client.patch("/api/tags/missing", json={"name": "X"})
    assert response.status_code == 404
    assert response.get_json() == {"error": "Tag not found"}


def test_delete_tag_keeps_projects(app, admin_client):
    with app.app_context():
        tag = Tag(name="Deck")
        project = Project(title="Porch")
        db.session.add_all([tag, project])
        db.session.flush()
        db.session.add(ProjectTag(project_id=project.id, tag_id=tag.id))
        db.session.commit()
        tag_id, project_id = tag.id, project.id

    response = admin_client.delete(f"/api/tags/{tag_id}")

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    with app.app_context():
        assert db.session.get(Tag, tag_id) is None
        assert ProjectTag.query.count() == 0
        assert db.session.get(Project, project_id) is not None
    assert admin_client.get(f"/api/projects/{project_id}").get_json()["tags"] == []


def test_delete_tag_not_found(admin_client):
    response = admin_client.delete("/api/tags/missing")
    assert response.status_code == 404

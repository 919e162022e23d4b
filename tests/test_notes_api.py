from datetime import datetime

GROCERIES = "Weekend shopping\n- [ ] milk\n- [x] eggs"


def create_note(client, title="Groceries", content=GROCERIES):
    res = client.post("/api/v1/notes/", json={"title": title, "content": content})
    assert res.status_code == 201
    return res.json()


def assert_note_shape(note: dict):
    for key in [
        "id",
        "title",
        "content",
        "parent_id",
        "is_done",
        "content_preview",
        "content_without_checkboxes",
        "child_count",
        "completed_count",
        "progress",
        "created_at",
        "updated_at",
    ]:
        assert key in note
    assert isinstance(note["id"], int)
    assert "position" not in note
    datetime.fromisoformat(note["created_at"])
    datetime.fromisoformat(note["updated_at"])


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] in ("memory", "sqlite")


class TestNotesCRUD:
    def test_create_note_with_checkboxes(self, client):
        note = create_note(client)
        assert_note_shape(note)
        assert note["title"] == "Groceries"
        assert note["parent_id"] is None
        assert note["child_count"] == 2
        assert note["completed_count"] == 1
        assert note["progress"] == 50.0
        assert note["content_preview"] == "Weekend shopping"
        assert note["content_without_checkboxes"] == "Weekend shopping"

    def test_preview_is_truncated(self, client):
        note = create_note(client, title="Long", content="a" * 150)
        assert note["content_preview"] == "a" * 100 + "..."
        assert note["content_without_checkboxes"] == "a" * 150

    def test_create_rejects_blank_title(self, client):
        res = client.post("/api/v1/notes/", json={"title": "   ", "content": ""})
        assert res.status_code == 422
        assert res.json()["error"] == "ValidationError"

    def test_get_notes_lists_only_top_level(self, client):
        first = create_note(client)
        second = create_note(client, title="Plain", content="no boxes")
        res = client.get("/api/v1/notes/")
        assert res.status_code == 200
        listed = res.json()
        assert [n["id"] for n in listed] == [first["id"], second["id"]]
        assert [n["child_count"] for n in listed] == [2, 0]

    def test_get_note_and_not_found(self, client):
        note = create_note(client)
        res = client.get(f"/api/v1/notes/{note['id']}")
        assert res.status_code == 200
        assert res.json()["content"] == GROCERIES

        res_404 = client.get("/api/v1/notes/999999")
        assert res_404.status_code == 404
        assert res_404.json()["error"] == "RES_NOT_FOUND"

    def test_update_note_resyncs_children(self, client):
        note = create_note(client)
        res = client.put(
            f"/api/v1/notes/{note['id']}",
            json={"title": "Groceries v2", "content": "- [x] milk\n- [ ] jam\n- [ ] tea"},
        )
        assert res.status_code == 200
        updated = res.json()
        assert updated["title"] == "Groceries v2"
        assert updated["child_count"] == 3

        children = client.get(f"/api/v1/notes/{note['id']}/children").json()
        assert [(c["title"], c["is_done"]) for c in children] == [
            ("milk", True),
            ("jam", False),
            ("tea", False),
        ]
        assert all(c["parent_id"] == note["id"] for c in children)

        res_nf = client.put("/api/v1/notes/424242", json={"title": "x", "content": ""})
        assert res_nf.status_code == 404

    def test_update_child_with_long_checkbox_text(self, client):
        content = "- [ ] " + "x" * 250
        note = create_note(client, title="Long", content=content)
        child = client.get(f"/api/v1/notes/{note['id']}/children").json()[0]

        res = client.put(f"/api/v1/notes/{child['id']}", json={"title": child["title"], "content": "notes"})
        assert res.status_code == 200
        assert res.json()["content"] == "notes"
        assert client.get(f"/api/v1/notes/{note['id']}").json()["content"] == content

    def test_update_rejects_blank_title(self, client):
        note = create_note(client)
        res = client.put(f"/api/v1/notes/{note['id']}", json={"title": "   ", "content": ""})
        assert res.status_code == 422
        assert res.json()["error"] == "ValidationError"

    def test_delete_parent_removes_children(self, client):
        note = create_note(client)
        children = client.get(f"/api/v1/notes/{note['id']}/children").json()
        assert len(children) == 2

        res_del = client.delete(f"/api/v1/notes/{note['id']}")
        assert res_del.status_code == 204
        assert res_del.text == ""

        assert client.get(f"/api/v1/notes/{note['id']}/children").status_code == 404
        for child in children:
            assert client.get(f"/api/v1/notes/{child['id']}").status_code == 404
        assert client.delete(f"/api/v1/notes/{note['id']}").status_code == 404


class TestChecklistCommands:
    def test_parse_checkboxes(self, client):
        res = client.post("/api/v1/notes/parse-checkboxes", json={"content": GROCERIES})
        assert res.status_code == 200
        assert res.json() == [
            {"text": "milk", "completed": False},
            {"text": "eggs", "completed": True},
        ]

    def test_parse_checkboxes_empty(self, client):
        assert client.post("/api/v1/notes/parse-checkboxes", json={"content": ""}).json() == []
        assert client.post("/api/v1/notes/parse-checkboxes", json={"content": "no boxes here"}).json() == []

    def test_update_note_status_on_child(self, client):
        note = create_note(client)
        milk = client.get(f"/api/v1/notes/{note['id']}/children").json()[0]

        res = client.put(f"/api/v1/notes/{milk['id']}/status", json={"is_done": True})
        assert res.status_code == 204

        parent = client.get(f"/api/v1/notes/{note['id']}").json()
        assert "- [x] milk" in parent["content"]
        assert parent["completed_count"] == 2
        assert client.get(f"/api/v1/notes/{milk['id']}").json()["is_done"] is True

        assert client.put("/api/v1/notes/999/status", json={"is_done": True}).status_code == 404

    def test_update_note_checkbox_status(self, client):
        note = create_note(client)
        res = client.put(
            f"/api/v1/notes/{note['id']}/checkboxes",
            json={"checkbox_text": "eggs", "new_status": False},
        )
        assert res.status_code == 200
        assert "- [ ] eggs" in res.json()["content"]
        children = client.get(f"/api/v1/notes/{note['id']}/children").json()
        assert [c["is_done"] for c in children] == [False, False]

    def test_update_note_checkbox_status_unknown_text(self, client):
        note = create_note(client)
        res = client.put(
            f"/api/v1/notes/{note['id']}/checkboxes",
            json={"checkbox_text": "caviar", "new_status": True},
        )
        assert res.status_code == 404
        body = res.json()
        assert body["error"] == "RES_NOT_FOUND"
        assert "caviar" in body["message"]

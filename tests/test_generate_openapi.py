import json

from tomatxt.generate_openapi import _ensure_tags, generate_openapi


def test_writes_schema_with_all_tags(tmp_path):
    out_path = generate_openapi(str(tmp_path / "interfaces"))
    with open(out_path, encoding="utf-8") as f:
        schema = json.load(f)
    assert {t["name"] for t in schema["tags"]} >= {"health", "notes", "timer"}
    assert "/api/v1/notes/{note_id}/checkboxes" in schema["paths"]
    assert "/api/v1/timer/tick" in schema["paths"]


def test_existing_tags_are_not_overridden():
    schema = {"tags": [{"name": "notes", "description": "custom"}]}
    _ensure_tags(schema)
    notes = [t for t in schema["tags"] if t["name"] == "notes"]
    assert notes == [{"name": "notes", "description": "custom"}]
    assert {t["name"] for t in schema["tags"]} == {"health", "notes", "timer"}

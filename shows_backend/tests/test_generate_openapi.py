import json

from src.api.generate_openapi import generate_openapi


def test_writes_schema_with_routes_and_tags(tmp_path):
    out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))

    with open(out, encoding="utf-8") as f:
        schema = json.load(f)

    assert "/api/shows" in schema["paths"]
    assert "/api/shows/{show_id}" in schema["paths"]
    assert "patch" in schema["paths"]["/api/shows/validate"]
    assert {"health", "shows"} <= {t["name"] for t in schema["tags"]}
    create_body = schema["paths"]["/api/shows"]["post"]["requestBody"]
    assert "title" in create_body["content"]["application/json"]["schema"]["properties"]

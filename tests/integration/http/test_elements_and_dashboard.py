from __future__ import annotations


async def test_health_is_public(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_property_sets_by_element_class(client, seeded, auth_headers):
    headers = auth_headers(seeded["admin"])

    chunk = await client.get("/api/v1/elements/chunk/1/property-sets", headers=headers)
    assert chunk.status_code == 200
    assert chunk.json()["element"] == {
        "id": 1,
        "element_class": "chunk",
        "name": "header",
        "description": "",
        "category": 0,
    }
    assert [p["name"] for p in chunk.json()["property_sets"]] == ["defaults", "compact"]

    snippet = await client.get("/api/v1/elements/snippet/1/property-sets", headers=headers)
    assert snippet.json()["element"]["name"] == "menu"
    assert [p["properties"] for p in snippet.json()["property_sets"]] == [{"limit": 3}]

    unknown = await client.get("/api/v1/elements/widget/1/property-sets", headers=headers)
    assert unknown.status_code == 422

    unlinked = await client.get("/api/v1/elements/tv/1/property-sets", headers=headers)
    assert unlinked.status_code == 404


async def test_recently_edited_widget(client, seeded, auth_headers):
    response = await client.get(
        "/api/v1/dashboard/widgets/recently_edited_resources",
        headers=auth_headers(seeded["admin"]),
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text
    assert html.index('data-id="2"') < html.index('data-id="1"')
    assert 'data-id="3"' not in html

    unknown = await client.get(
        "/api/v1/dashboard/widgets/weather", headers=auth_headers(seeded["admin"])
    )
    assert unknown.status_code == 404

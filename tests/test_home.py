from app import create_app


def test_home_lists_plugins():
    app = create_app("TestingConfig")
    client = app.test_client()
    response = client.get("/")
    assert response.status_code == 200
    payload = response.get_json()["data"]
    titles = [item["title"] for item in payload["plugins"]]
    assert "Scientific Calculator" in titles
    assert payload["name"] == "Engineering Toolkit"
    assert response.headers.get("Content-Security-Policy")
    assert response.headers.get("X-Content-Type-Options") == "nosniff"


def test_request_id_is_echoed():
    client = create_app("TestingConfig").test_client()
    response = client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.headers.get("X-Request-ID") == "abc123"
    assert client.get("/").headers.get("X-Request-ID")


def test_unknown_route_returns_json_error():
    client = create_app("TestingConfig").test_client()
    response = client.get("/no/such/page")
    assert response.status_code == 404
    body = response.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "not_found"


def test_wrong_method_returns_json_error():
    client = create_app("TestingConfig").test_client()
    response = client.get("/api/scientific_calculator/evaluate")
    assert response.status_code == 405
    assert response.get_json()["error"]["code"] == "method_not_allowed"

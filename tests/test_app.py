def test_root_and_health(client):
    assert client.get("/").json() == {"message": "Airtime API is running"}
    assert client.get("/health").json() == {"status": "healthy"}


def test_security_headers_on_api_responses(client):
    res = client.get("/jobs")

    assert res.headers["X-Frame-Options"] == "DENY"
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["Cache-Control"].startswith("no-store")
    assert "default-src 'none'" in res.headers["Content-Security-Policy"]


def test_health_is_excluded_from_security_headers(client):
    res = client.get("/health")

    assert "X-Frame-Options" not in res.headers


def test_validation_errors_stay_422(client):
    res = client.post("/clients", json={"email": "no-name@acme.ng"})

    assert res.status_code == 422
    assert isinstance(res.json()["detail"], list)

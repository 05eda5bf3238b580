import sys

from jpegshrink import config


def test_upload_form(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text
    assert 'name="image"' in html
    assert 'accept="image/*"' in html
    assert 'id="targetSize" name="targetSize"' in html
    assert 'min="50" max="2000" value="500"' in html
    assert 'step="0.1"' in html
    assert 'action="/api/compress"' in html
    assert 'download="compressed-image.jpg"' in html


def test_stylesheet_is_served(client):
    response = client.get("/static/styles.css")

    assert response.status_code == 200
    assert ".form-group" in response.text


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": config.VERSION}


def test_detailed_health(client, workdir, monkeypatch):
    monkeypatch.setattr(config, "COMPRESSOR_BACKEND", "command")
    monkeypatch.setattr(config, "COMPRESSOR_COMMAND", sys.executable)

    body = client.get("/health/detailed").json()

    assert body["status"] == "healthy"
    assert body["compressor"]["status"] == "ok"
    assert body["directories"]["uploads"]["path"] == str(workdir / "uploads")
    assert body["directories"]["outputs"]["writable"] is True
    assert "cpu_usage" in body["system"]


def test_detailed_health_reports_missing_compressor(client, monkeypatch):
    monkeypatch.setattr(config, "COMPRESSOR_BACKEND", "matlab")
    monkeypatch.setattr(config, "MATLAB_EXECUTABLE", "/nonexistent/matlab")

    body = client.get("/health/detailed").json()

    assert body["status"] == "degraded"
    assert body["compressor"]["status"] == "error"
    assert "not found" in body["compressor"]["message"]


def test_unknown_route_uses_error_body(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}

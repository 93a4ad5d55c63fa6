import pytest
from httpx import ASGITransport, AsyncClient

from conftest import make_settings
from main import create_app
from shared.exceptions import ValidationError


def _with_failing_routes(app):
    @app.get("/api/boom")
    async def boom():
        raise RuntimeError("kaboom")

    @app.get("/api/invalid")
    async def invalid():
        raise ValidationError("Bad input", additional_info="email is required")

    return app


@pytest.fixture
async def make_client():
    clients = []

    async def _make(headers=None, **overrides):
        app = _with_failing_routes(create_app(make_settings(**overrides)))
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        ac = AsyncClient(transport=transport, base_url="http://test", headers=headers or {})
        clients.append(ac)
        return ac

    yield _make
    for ac in clients:
        await ac.aclose()


async def test_missing_client_id_is_rejected(make_client):
    client = await make_client()
    resp = await client.get("/api/invalid")
    assert resp.status_code == 401
    assert resp.json() == {
        "success": False,
        "message": "ClientId header is missing",
        "errorCode": "CLIENT_ID_MISSING",
    }


async def test_wrong_client_id_is_rejected(make_client):
    client = await make_client(headers={"clientid": "someone-else"})
    resp = await client.get("/api/invalid")
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Invalid Client Id"


async def test_valid_client_id_passes(make_client):
    client = await make_client(headers={"clientid": "test-client"})
    resp = await client.get("/api/invalid")
    assert resp.status_code == 400


async def test_local_mode_skips_client_id(make_client):
    client = await make_client(SITE_MODE="local")
    resp = await client.get("/api/invalid")
    assert resp.status_code == 400

    client = await make_client(headers={"clientid": "wrong"}, SITE_MODE="local")
    resp = await client.get("/api/invalid")
    assert resp.status_code == 400


async def test_preflight_skips_client_id(make_client):
    client = await make_client()
    resp = await client.options(
        "/api/users",
        headers={
            "Origin": "http://example.org",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code == 200
    assert "access-control-allow-origin" in resp.headers


async def test_unknown_route_returns_not_found(make_client):
    client = await make_client(headers={"clientid": "test-client"})
    resp = await client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Page not found"}


async def test_static_files_do_not_need_client_id(make_client):
    client = await make_client()
    resp = await client.get("/static/robots.txt")
    assert resp.status_code == 200
    assert "User-agent" in resp.text


async def test_application_error_is_echoed(make_client):
    client = await make_client(headers={"clientid": "test-client"})
    resp = await client.get("/api/invalid")
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "message": "Bad input",
        "errors": ["email is required"],
        "errorCode": "VALIDATION_ERROR",
    }


async def test_unhandled_error_is_hidden_in_production(make_client):
    client = await make_client(headers={"clientid": "test-client"}, ENVIRONMENT="production")
    resp = await client.get("/api/boom")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Server error, please try again later"}


async def test_unhandled_error_is_echoed_in_development(make_client):
    client = await make_client(headers={"clientid": "test-client"}, ENVIRONMENT="development")
    resp = await client.get("/api/boom")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "kaboom"}


async def test_unhandled_error_keeps_cors_headers(make_client):
    client = await make_client(headers={"clientid": "test-client", "Origin": "http://example.org"})
    resp = await client.get("/api/boom")
    assert resp.status_code == 500
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.json()["success"] is False


async def test_static_exemption_stops_at_the_mount(make_client):
    client = await make_client()
    resp = await client.get("/staticfoo")
    assert resp.status_code == 401
    assert resp.json()["errorCode"] == "CLIENT_ID_MISSING"

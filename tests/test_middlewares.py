from fastapi.testclient import TestClient
from starlette.requests import Request

from recipeshare.main import create_app
from recipeshare.middleware.rate_limit import RateLimitMiddleware
from recipeshare.security import create_access_token


def test_size_limit_middleware(client, settings):
    """El middleware debe rechazar cuerpos que exceden el límite configurado."""
    big_body = "x" * (settings.max_body_bytes + 1)
    resp = client.post("/auth/login", content=big_body, headers={"Content-Type": "text/plain"})
    assert resp.status_code == 413
    assert resp.json()["code"] == "payload_too_large"


def test_rate_limit_middleware(settings):
    """Al exceder el número de peticiones por ventana se debe obtener 429."""
    settings.rate_limit_rpm = settings.rate_limit_burst = 2
    client = TestClient(create_app(settings))

    payload = {"email": "user@example.com", "devPin": "000000"}
    assert client.post("/auth/login", json=payload).status_code == 200
    assert client.post("/auth/login", json=payload).status_code == 200
    resp = client.post("/auth/login", json=payload)
    assert resp.status_code == 429
    assert resp.json()["code"] == "rate_limited"
    # /health está exento
    assert client.get("/health").status_code == 200


def test_unexpected_errors_are_opaque_500(app, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(app.state.recipe_service, "list_recipes", boom)
    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get("/recipes")
    assert resp.status_code == 500
    assert resp.json() == {"code": "internal_error", "detail": "Internal server error", "meta": None}


async def _noop_app(scope, receive, send):
    pass


def _request(headers=(), host="10.0.0.1"):
    raw = [(k.lower().encode(), v.encode()) for k, v in headers]
    return Request({"type": "http", "method": "GET", "path": "/recipes", "headers": raw, "client": (host, 1234)})


def test_rate_limit_keys_by_verified_identity(settings):
    mw = RateLimitMiddleware(_noop_app, settings)
    token = create_access_token(settings, user_id="alice")
    assert mw._identity(_request([("X-API-Key", "alice-key")])) == "key:alice"
    assert mw._identity(_request([("Authorization", f"Bearer {token}")])) == "jwt:alice"
    # credenciales basura cuentan contra la IP
    assert mw._identity(_request([("Authorization", "Bearer junk1")])) == "ip:10.0.0.1"
    assert mw._identity(_request([("X-API-Key", "nope")])) == "ip:10.0.0.1"


def test_rate_limit_junk_tokens_share_one_bucket(settings):
    settings.rate_limit_rpm = settings.rate_limit_burst = 3
    client = TestClient(create_app(settings))
    codes = [client.get("/recipes", headers={"Authorization": f"Bearer junk{i}"}).status_code for i in range(10)]
    assert codes[:3] == [401, 401, 401]
    assert set(codes[3:]) == {429}


def test_rate_limit_sweep_drops_stale_buckets(settings):
    mw = RateLimitMiddleware(_noop_app, settings)
    for i in range(200):
        mw.buckets[f"ip:10.0.{i}.1"].append(0.0)
    mw.buckets["ip:fresh"].append(100.0)
    mw._sweep(now=120.0)
    assert list(mw.buckets) == ["ip:fresh"]

# test/test_health.py
from conftest import make_settings
from libs.adapters.queue_inmemory import InMemoryQueueAdapter


def test_healthz(build_client):
    """Basic /healthz endpoint check."""
    client = build_client()
    response = client.get("/healthz")

    assert response.status_code == 200, f"Unexpected status: {response.status_code}"
    data = response.json()
    assert isinstance(data, dict), "Response must be a JSON object"
    assert data.get("status") == "ok", f"Unexpected response JSON: {data}"


def test_readyz_ok_when_queue_and_keys_configured(build_client):
    client = build_client(make_settings(QSTASH_TOKEN="tok"), queue=InMemoryQueueAdapter())
    response = client.get("/readyz")
    assert response.status_code == 200
    assert response.json() == {"queue": True, "signing": True, "ok": True}


def test_readyz_not_ready_without_token_in_production(build_client):
    client = build_client(make_settings(QSTASH_CURRENT_SIGNING_KEY=None))
    response = client.get("/readyz")
    assert response.status_code == 503
    assert response.json() == {"queue": False, "signing": False, "ok": False}


def test_readyz_development_tolerates_missing_config(build_client):
    client = build_client(make_settings(APP_ENV="development", QSTASH_CURRENT_SIGNING_KEY=None))
    assert client.get("/readyz").json()["ok"] is True

"""
API endpoint tests.

Uses FastAPI TestClient (backed by httpx) with a pre-loaded FilterSession
for the engine routes, and a real background load from a records directory
for the loading gate.  Each test group covers one endpoint.
"""

import pytest

# FastAPI TestClient requires fastapi + httpx; skip the entire module if not installed
pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402

from api.app import create_app  # noqa: E402
from engine.filters import NoResultsPolicy  # noqa: E402
from engine.session import FilterSession  # noqa: E402
from loader.sources import DirectoryRecordSource, RecordSource  # noqa: E402
from utils.config import AppConfig  # noqa: E402

PREFIX = "/api/v1"


@pytest.fixture()
def client(loaded_session):
    """TestClient over a READY session holding the five sample records."""
    app = create_app(AppConfig(), session=loaded_session, load_on_startup=False)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def idle_client():
    """TestClient whose session never loads."""
    app = create_app(AppConfig(), load_on_startup=False)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def _toggle(client, trait_type, value):
    return client.post(f"{PREFIX}/selection/toggle",
                       json={"trait_type": trait_type, "value": value})


def _names(body):
    return [r["name"] for r in body["results"]]


# ── /health ───────────────────────────────────────────────────────────────────

class TestHealth:
    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["records"] == 5
        assert body["trait_types"] == 3

    def test_health_empty(self, idle_client):
        resp = idle_client.get("/health")
        assert resp.status_code == 503
        assert resp.json()["status"] == "empty"

    def test_request_id_header(self, client):
        assert client.get("/health").headers.get("X-Request-ID")


# ── Loading gate ──────────────────────────────────────────────────────────────

class TestLoadingGate:
    def test_engine_routes_503_before_load(self, idle_client):
        for resp in (
            idle_client.get(f"{PREFIX}/traits"),
            idle_client.get(f"{PREFIX}/results"),
            _toggle(idle_client, "Color", "Red"),
            idle_client.post(f"{PREFIX}/selection/reset"),
        ):
            assert resp.status_code == 503
            assert resp.json()["state"] == "empty"

    def test_background_load_becomes_ready(self, records_dir):
        source = DirectoryRecordSource(records_dir, count=5, workers=2)
        app = create_app(AppConfig(), source=source)
        with TestClient(app) as c:
            app.state.load_thread.join(timeout=10)
            resp = c.get("/health")
            assert resp.status_code == 200
            body = resp.json()
            assert body["records"] == 4
            assert body["load"]["skips"][0]["item"] == "3"
            assert c.get(f"{PREFIX}/traits").status_code == 200

    def test_failed_load_reports_error(self, records_dir):
        (records_dir / "2.json").write_text("{broken", encoding="utf-8")
        source = DirectoryRecordSource(records_dir, count=5)
        app = create_app(AppConfig(), source=source)
        with TestClient(app, raise_server_exceptions=False) as c:
            app.state.load_thread.join(timeout=10)
            resp = c.get("/health")
            assert resp.status_code == 503
            assert resp.json()["status"] == "failed"
            assert "Malformed JSON" in resp.json()["error"]
            assert c.get(f"{PREFIX}/results").json()["state"] == "failed"


# ── /api/v1/traits, /api/v1/records ──────────────────────────────────────────

class TestTraits:
    def test_traits_sorted_for_display(self, client):
        resp = client.get(f"{PREFIX}/traits")
        assert resp.status_code == 200
        body = resp.json()
        assert [t["trait_type"] for t in body] == ["Color", "Hat", "Size"]
        size = body[2]
        assert size["values"] == ["Alpha", "Type1", "Type2", "Type10"]
        assert size["checked"] == {
            "Type10": False, "Type2": False, "Type1": False, "Alpha": False,
        }

    def test_records_in_load_order(self, client):
        body = client.get(f"{PREFIX}/records").json()
        assert [r["name"] for r in body] == [f"Item #{i}" for i in range(1, 6)]
        assert body[0]["attributes"][0] == {"trait_type": "Color", "value": "Red"}


# ── /api/v1/selection ─────────────────────────────────────────────────────────

class TestSelection:
    def test_initial_state(self, client):
        body = client.get(f"{PREFIX}/selection").json()
        assert body["all_unchecked"] is True
        assert body["results"] == []
        assert body["result_count"] == 0

    def test_toggle_filters(self, client):
        resp = _toggle(client, "Color", "Red")
        assert resp.status_code == 200
        body = resp.json()
        assert _names(body) == ["Item #1", "Item #3", "Item #5"]
        assert body["selection"]["Color"]["Red"] is True
        assert body["result_count"] == 3

        body = _toggle(client, "Hat", "Cap").json()
        assert _names(body) == ["Item #3", "Item #5"]
        assert _names(client.get(f"{PREFIX}/selection").json()) == ["Item #3", "Item #5"]

    def test_two_values_same_trait_is_empty(self, client):
        _toggle(client, "Color", "Red")
        body = _toggle(client, "Color", "Blue").json()
        assert body["results"] == []

    def test_unknown_key_is_400(self, client):
        resp = _toggle(client, "Color", "Purple")
        assert resp.status_code == 400
        assert resp.json()["error"] == "Unknown trait selection"
        assert client.get(f"{PREFIX}/selection").json()["all_unchecked"] is True

    def test_missing_body_field_is_422(self, client):
        resp = client.post(f"{PREFIX}/selection/toggle", json={"trait_type": "Color"})
        assert resp.status_code == 422

    def test_reset(self, client):
        _toggle(client, "Color", "Green")
        body = client.post(f"{PREFIX}/selection/reset").json()
        assert body["all_unchecked"] is True
        assert body["results"] == []
        assert not any(
            checked for values in body["selection"].values() for checked in values.values()
        )
        assert client.get(f"{PREFIX}/results").json() == []

    def test_results_endpoint(self, client):
        _toggle(client, "Size", "Type2")
        assert [r["name"] for r in client.get(f"{PREFIX}/results").json()] == [
            "Item #2", "Item #5",
        ]


class TestSentinelPolicy:
    def test_sentinel_returned_but_not_counted(self, sample_records):
        session = FilterSession(NoResultsPolicy.SENTINEL)
        session.set_records(sample_records)
        app = create_app(AppConfig(), session=session, load_on_startup=False)
        with TestClient(app) as c:
            body = c.get(f"{PREFIX}/selection").json()
            assert _names(body) == ["NONE_SENTINEL"]
            assert body["result_count"] == 0

            body = _toggle(c, "Color", "Green").json()
            assert _names(body) == ["Item #4"]


class _ExplodingSource(RecordSource):
    def load(self):
        raise RuntimeError("unexpected")


class TestUnexpectedLoadError:
    def test_health_reports_failed(self):
        app = create_app(AppConfig(), source=_ExplodingSource())
        with TestClient(app, raise_server_exceptions=False) as c:
            app.state.load_thread.join(timeout=10)
            resp = c.get("/health")
            assert resp.status_code == 503
            assert resp.json()["status"] == "failed"
            assert "RuntimeError" in resp.json()["error"]
            traits = c.get(f"{PREFIX}/traits")
            assert traits.status_code == 503
            assert "Retry-After" not in traits.headers

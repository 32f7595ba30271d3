"""
Tests for the HTTP app: simulated analysis endpoint and health
"""
import httpx
import pytest

from truthcheck.analysis.lifecycle import RequestStateMachine, RequestStatus
from truthcheck.components.input_store import InputStore
from truthcheck.components.verdict_presenter import present_state
from truthcheck.core.analysis_client import AnalysisClient
from truthcheck.core.errors import ErrorKind


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["simulated"] is True


def test_analyze_endpoint_returns_result(client):
    r = client.post("/api/analyze", json={"text": "Local community raises funds for new children's hospital wing"})
    assert r.status_code == 200
    assert r.json()["verdict"] == "real"
    assert r.json()["confidence"] == 94
    assert "X-Request-ID" in r.headers


def test_analyze_endpoint_blank_text_is_service_error(client):
    r = client.post("/api/analyze", json={"text": "  "})
    assert r.status_code == 200
    assert r.json() == {"error": "Text must not be empty"}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_state_machine_against_app(app):
    transport = httpx.ASGITransport(app=app)
    client = AnalysisClient(base_url="http://testserver", transport=transport)
    store = InputStore()
    machine = RequestStateMachine(client, store)

    store.use_sample(2)
    state = await machine.submit()

    assert state.status == RequestStatus.SUCCEEDED
    attrs = present_state(state)
    assert attrs.label == "Likely Misinformation"
    assert attrs.confidence_bar_width == 87
    assert len(attrs.red_flags) == 3


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unknown_endpoint_is_transport_error(app):
    transport = httpx.ASGITransport(app=app)
    client = AnalysisClient(base_url="http://testserver", endpoint="/api/missing", transport=transport)
    machine = RequestStateMachine(client, InputStore("some news"))

    state = await machine.submit()

    assert state.status == RequestStatus.FAILED
    assert state.error_kind == ErrorKind.TRANSPORT_ERROR
    assert "404" in state.message

"""
Tests for the analysis service client
"""
import httpx
import pytest

from truthcheck.components.contracts import AnalysisRequest, AnalysisResult, Verdict
from truthcheck.core.analysis_client import AnalysisClient
from truthcheck.core.errors import AnalysisFailure, ErrorKind

SUCCESS_BODY = {
    "verdict": "fake",
    "confidence": 87,
    "explanation": "Sensationalist language.",
    "redFlags": ["Sensationalist headline", "Unverified claims", "Emotional manipulation patterns"],
}


def _client(transport) -> AnalysisClient:
    return AnalysisClient(base_url="http://analysis.test", endpoint="/api/analyze", timeout=5.0, transport=transport)


@pytest.mark.asyncio
async def test_success_returns_result_unchanged(make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json=SUCCESS_BODY))

    outcome = await _client(transport).analyze(AnalysisRequest(text="BREAKING news"))

    assert isinstance(outcome, AnalysisResult)
    assert outcome.verdict == Verdict.FAKE
    assert outcome.confidence == 87
    assert outcome.red_flags == SUCCESS_BODY["redFlags"]
    assert outcome.to_payload() == SUCCESS_BODY


@pytest.mark.asyncio
async def test_posts_trimmed_text_once(make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json=SUCCESS_BODY))

    await _client(transport).analyze(AnalysisRequest(text="  some headline \n"))

    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://analysis.test/api/analyze"
    assert transport.sent_payloads() == [{"text": "some headline"}]


@pytest.mark.asyncio
async def test_service_error_payload(make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={"error": "rate limited"}))

    outcome = await _client(transport).analyze(AnalysisRequest(text="anything"))

    assert outcome == AnalysisFailure(kind=ErrorKind.SERVICE_ERROR, message="rate limited")


@pytest.mark.asyncio
async def test_non_2xx_is_transport_error(make_transport):
    transport = make_transport(lambda request: httpx.Response(503, json={"error": "down"}))

    outcome = await _client(transport).analyze(AnalysisRequest(text="anything"))

    assert isinstance(outcome, AnalysisFailure)
    assert outcome.kind == ErrorKind.TRANSPORT_ERROR
    assert "503" in outcome.message
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_timeout_is_transport_error_without_retry(make_transport):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    transport = make_transport(handler)

    outcome = await _client(transport).analyze(AnalysisRequest(text="anything"))

    assert outcome.kind == ErrorKind.TRANSPORT_ERROR
    assert "timed out" in outcome.message
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_connection_error_is_transport_error(make_transport):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    outcome = await _client(make_transport(handler)).analyze(AnalysisRequest(text="anything"))

    assert outcome.kind == ErrorKind.TRANSPORT_ERROR
    assert outcome.message.startswith("Could not connect")


@pytest.mark.asyncio
async def test_unparsable_body_is_transport_error(make_transport):
    transport = make_transport(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    outcome = await _client(transport).analyze(AnalysisRequest(text="anything"))

    assert outcome.kind == ErrorKind.TRANSPORT_ERROR
    assert "not valid JSON" in outcome.message


@pytest.mark.parametrize(
    "body",
    [
        {**SUCCESS_BODY, "confidence": 150},
        {**SUCCESS_BODY, "confidence": -1},
        {**SUCCESS_BODY, "verdict": "satire"},
        {"verdict": "real"},
        ["not", "an", "object"],
    ],
)
@pytest.mark.asyncio
async def test_malformed_result_is_transport_error(make_transport, body):
    transport = make_transport(lambda request: httpx.Response(200, json=body))

    outcome = await _client(transport).analyze(AnalysisRequest(text="anything"))

    assert isinstance(outcome, AnalysisFailure)
    assert outcome.kind == ErrorKind.TRANSPORT_ERROR
    assert outcome.message.startswith("Malformed response")


@pytest.mark.asyncio
async def test_missing_red_flags_defaults_to_empty(make_transport):
    body = {"verdict": "real", "confidence": 94, "explanation": "Balanced."}
    transport = make_transport(lambda request: httpx.Response(200, json=body))

    outcome = await _client(transport).analyze(AnalysisRequest(text="anything"))

    assert outcome.red_flags == []


def test_url_falls_back_to_settings():
    from truthcheck.core.config import get_settings

    client = AnalysisClient()
    assert client.url == get_settings().analysis_url
    assert client.timeout == get_settings().analysis_timeout_seconds


def test_blank_request_cannot_be_built():
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        AnalysisRequest(text="   ")


@pytest.mark.asyncio
async def test_invalid_service_url_is_transport_error(make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json=SUCCESS_BODY))
    client = AnalysisClient(base_url="http://analysis.test:notaport", transport=transport)

    outcome = await client.analyze(AnalysisRequest(text="anything"))

    assert isinstance(outcome, AnalysisFailure)
    assert outcome.kind == ErrorKind.TRANSPORT_ERROR
    assert outcome.message.startswith("Invalid analysis service URL")
    assert transport.requests == []


def test_invalid_url_message():
    from truthcheck.core.errors import describe_transport_error

    message = describe_transport_error(httpx.InvalidURL("Invalid port"), "http://analysis.test:x/api/analyze")
    assert message == "Invalid analysis service URL http://analysis.test:x/api/analyze: Invalid port"

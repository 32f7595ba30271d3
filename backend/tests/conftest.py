"""
Pytest configuration and fixtures
"""
import importlib.util
import json
import os
import sys
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Test-safe defaults; must be set before settings are first loaded
os.environ.setdefault("DEMO_SIMULATED_DELAY_SECONDS", "0")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("ANALYSIS_SERVICE_URL", "http://analysis.test")

import httpx

from truthcheck.components.contracts import AnalysisResult, Verdict

MISINFORMATION_FLAGS = ["Sensationalist headline", "Unverified claims", "Emotional manipulation patterns"]


@pytest.fixture
def authentic_result() -> AnalysisResult:
    return AnalysisResult(
        verdict=Verdict.REAL,
        confidence=94,
        explanation="This content follows factual reporting patterns with verifiable claims and balanced language.",
        red_flags=[],
    )


@pytest.fixture
def misinformation_result() -> AnalysisResult:
    return AnalysisResult(
        verdict=Verdict.FAKE,
        confidence=87,
        explanation="This content contains sensationalist language patterns.",
        red_flags=list(MISINFORMATION_FLAGS),
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served"""

    def __init__(self, handler):
        self.requests = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def sent_payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def make_transport():
    """Build a recording transport from a request handler"""
    return RecordingTransport


@pytest.fixture(scope="session")
def app():
    """Load the FastAPI app from backend/main.py"""
    main_path = backend_dir / "main.py"
    spec = importlib.util.spec_from_file_location("main", main_path)
    main_module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(main_module)
    return main_module.app


@pytest.fixture(scope="function")
def client(app):
    """Create test client"""
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client

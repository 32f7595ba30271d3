"""
Simulated analysis service used by the public demo.

Keyword heuristic standing in for the real classifier: results are for preview
purposes only.
"""
import asyncio
from typing import Optional

from truthcheck.components.contracts import AnalysisResult, Verdict
from truthcheck.core.config import get_settings
from truthcheck.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

SUSPICIOUS_KEYWORDS = ("breaking", "mandatory", "diamonds")

SUSPICIOUS_RED_FLAGS = [
    "Sensationalist headline",
    "Unverified claims",
    "Emotional manipulation patterns",
]

SUSPICIOUS_EXPLANATION = (
    "This content contains sensationalist language patterns and unverified claims "
    "commonly associated with misinformation."
)
AUTHENTIC_EXPLANATION = (
    "This content follows factual reporting patterns with verifiable claims and balanced language."
)

EMPTY_TEXT_ERROR = "Text must not be empty"


def is_suspicious(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in SUSPICIOUS_KEYWORDS)


def simulate_verdict(text: str) -> AnalysisResult:
    if is_suspicious(text):
        return AnalysisResult(
            verdict=Verdict.FAKE,
            confidence=87,
            explanation=SUSPICIOUS_EXPLANATION,
            red_flags=list(SUSPICIOUS_RED_FLAGS),
        )
    return AnalysisResult(
        verdict=Verdict.REAL,
        confidence=94,
        explanation=AUTHENTIC_EXPLANATION,
        red_flags=[],
    )


class SimulatedAnalysisService:
    """Answers analysis requests after an artificial delay"""

    def __init__(self, delay_seconds: Optional[float] = None):
        self._delay_seconds = delay_seconds

    @property
    def delay_seconds(self) -> float:
        if self._delay_seconds is not None:
            return self._delay_seconds
        return get_settings().demo_simulated_delay_seconds

    async def analyze_text(self, text: str) -> dict:
        """
        Produce a response body following the service contract

        Returns:
            Result payload, or {"error": ...} for blank text
        """
        text = (text or "").strip()
        if not text:
            return {"error": EMPTY_TEXT_ERROR}

        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        result = simulate_verdict(text)
        logger.info(
            "Simulated analysis",
            extra={"verdict": result.verdict.value, "text_length": len(text)}
        )
        return result.to_payload()

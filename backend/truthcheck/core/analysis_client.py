"""
Analysis service client: one POST per analysis, result or typed failure
"""
import time
from typing import Optional, Union

import httpx
from pydantic import ValidationError

from truthcheck.components.contracts import AnalysisRequest, AnalysisResult
from truthcheck.core.config import get_settings
from truthcheck.core.errors import AnalysisFailure, describe_transport_error
from truthcheck.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

AnalysisOutcome = Union[AnalysisResult, AnalysisFailure]


class AnalysisClient:
    """
    Client for the remote analysis service

    Every call to `analyze` performs exactly one HTTP exchange. There is no
    retry and no response cache; the caller records the outcome.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = None
        self._base_url = base_url
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport

    @property
    def settings(self):
        """Lazy load settings"""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def base_url(self) -> str:
        return (self._base_url or self.settings.analysis_service_url).rstrip("/")

    @property
    def endpoint(self) -> str:
        endpoint = self._endpoint or self.settings.analysis_endpoint
        return endpoint if endpoint.startswith("/") else "/" + endpoint

    @property
    def url(self) -> str:
        return self.base_url + self.endpoint

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else self.settings.analysis_timeout_seconds

    async def analyze(self, request: AnalysisRequest) -> AnalysisOutcome:
        """
        Send one analysis request

        Args:
            request: Validated request carrying non-blank text

        Returns:
            AnalysisResult on success, AnalysisFailure otherwise
        """
        start_time = time.monotonic()
        logger.debug(
            "Sending analysis request",
            extra={"url": self.url, "text_length": len(request.text)}
        )

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self.endpoint, json=request.to_payload())
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            message = describe_transport_error(e, self.url)
            logger.warning(
                "Analysis request failed",
                extra={"url": self.url, "error": message, "error_type": type(e).__name__}
            )
            return AnalysisFailure.transport_error(message)

        duration_ms = int((time.monotonic() - start_time) * 1000)

        if isinstance(data, dict) and data.get("error") is not None:
            logger.info(
                "Analysis service reported an error",
                extra={"url": self.url, "error": str(data["error"]), "duration_ms": duration_ms}
            )
            return AnalysisFailure.service_error(data["error"])

        try:
            result = AnalysisResult.model_validate(data)
        except ValidationError as e:
            message = describe_transport_error(e, self.url)
            logger.warning(
                "Analysis response did not match the result contract",
                extra={"url": self.url, "error": message}
            )
            return AnalysisFailure.transport_error(message)

        logger.info(
            "Analysis completed",
            extra={
                "verdict": result.verdict.value,
                "confidence": result.confidence,
                "red_flags": len(result.red_flags),
                "duration_ms": duration_ms,
            }
        )
        return result


# Global client instance
_analysis_client: Optional[AnalysisClient] = None


def get_analysis_client() -> AnalysisClient:
    """Get global analysis client instance"""
    global _analysis_client
    if _analysis_client is None:
        _analysis_client = AnalysisClient()
    return _analysis_client

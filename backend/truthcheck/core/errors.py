"""
Analysis failure taxonomy and classification of transport errors
"""
import json
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError


class ErrorKind(str, Enum):
    """Failure categories surfaced to the user"""
    SERVICE_ERROR = "service_error"  # Service explicitly rejected or flagged the input
    TRANSPORT_ERROR = "transport_error"  # Network, timeout, status or parse failure


class AnalysisFailure(BaseModel):
    """Failed analysis outcome, returned as a value rather than raised"""
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str

    @classmethod
    def service_error(cls, message: Any) -> "AnalysisFailure":
        return cls(kind=ErrorKind.SERVICE_ERROR, message=str(message))

    @classmethod
    def transport_error(cls, message: str) -> "AnalysisFailure":
        return cls(kind=ErrorKind.TRANSPORT_ERROR, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


def describe_transport_error(exc: Exception, url: Optional[str] = None) -> str:
    """
    Build a user-facing message for a transport-level failure

    Args:
        exc: Exception raised while talking to the service or decoding its reply
        url: Endpoint the request was sent to

    Returns:
        Human readable description
    """
    target = url or "analysis service"

    if isinstance(exc, httpx.InvalidURL):
        return f"Invalid analysis service URL {target}: {exc}"
    if isinstance(exc, httpx.TimeoutException):
        return f"Request to {target} timed out"
    if isinstance(exc, httpx.ConnectError):
        return f"Could not connect to {target}"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP error from {target}: {exc.response.status_code}"
    if isinstance(exc, json.JSONDecodeError):
        return f"Malformed response from {target}: body is not valid JSON"
    if isinstance(exc, ValidationError):
        fields = sorted({".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()})
        detail = ", ".join(f for f in fields if f) or "result"
        return f"Malformed response from {target}: invalid {detail}"
    if isinstance(exc, httpx.HTTPError):
        return f"Error calling {target}: {exc}"
    return f"Unexpected error calling {target}: {exc}"

"""
RequestStateMachine: explicit lifecycle of the demo's analysis request.

Idle → Pending → Succeeded | Failed, and back to Pending only through a new
submit. At most one request is in flight; a submit while Pending is a no-op.
Observers subscribe to state changes instead of polling.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from truthcheck.components.contracts import AnalysisRequest, AnalysisResult
from truthcheck.components.input_store import InputStore
from truthcheck.core.analysis_client import AnalysisClient
from truthcheck.core.errors import AnalysisFailure, ErrorKind
from truthcheck.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

CANCELLED_MESSAGE = "Analysis request was cancelled"


class RequestStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ALLOWED_TRANSITIONS: Dict[RequestStatus, Set[RequestStatus]] = {
    RequestStatus.IDLE: {RequestStatus.PENDING},
    RequestStatus.PENDING: {RequestStatus.SUCCEEDED, RequestStatus.FAILED},
    # resting states until the next submit
    RequestStatus.SUCCEEDED: {RequestStatus.PENDING},
    RequestStatus.FAILED: {RequestStatus.PENDING},
}


@dataclass(frozen=True)
class TransitionResult:
    allowed: bool
    reason: Optional[str] = None


def validate_transition(current: RequestStatus, target: RequestStatus) -> TransitionResult:
    if target in ALLOWED_TRANSITIONS.get(current, set()):
        return TransitionResult(True)
    return TransitionResult(False, f"disallowed_transition:{current.value}->{target.value}")


def allowed_targets(current: RequestStatus) -> List[str]:
    return sorted(s.value for s in ALLOWED_TRANSITIONS.get(current, set()))


@dataclass(frozen=True)
class RequestState:
    """One variant of Idle | Pending | Succeeded(result) | Failed(kind, message)"""
    status: RequestStatus
    result: Optional[AnalysisResult] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "RequestState":
        return cls(RequestStatus.IDLE)

    @classmethod
    def pending(cls) -> "RequestState":
        return cls(RequestStatus.PENDING)

    @classmethod
    def succeeded(cls, result: AnalysisResult) -> "RequestState":
        return cls(RequestStatus.SUCCEEDED, result=result)

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> "RequestState":
        return cls(RequestStatus.FAILED, error_kind=kind, message=message)

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @property
    def is_settled(self) -> bool:
        return self.status in (RequestStatus.SUCCEEDED, RequestStatus.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "result": self.result.to_payload() if self.result else None,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
        }


@dataclass(frozen=True)
class StateTransition:
    from_status: RequestStatus
    to_status: RequestStatus
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_state": self.from_status.value,
            "to_state": self.to_status.value,
            "timestamp": self.timestamp.isoformat(),
        }


StateListener = Callable[[RequestState], None]


class RequestStateMachine:
    """
    Owner of the single RequestState

    The Pending transition is applied before the first suspension point of
    `submit`, so a concurrent second submit always observes Pending.
    """

    def __init__(self, client: AnalysisClient, input_store: Optional[InputStore] = None):
        self.client = client
        self.input_store = input_store or InputStore()
        self.input_store.bind_pending_probe(lambda: self.is_pending)

        self._state = RequestState.idle()
        self._listeners: List[StateListener] = []
        self._transitions: List[StateTransition] = []
        self._inflight: Optional["asyncio.Task[RequestState]"] = None

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state.is_pending

    @property
    def transitions(self) -> List[StateTransition]:
        return list(self._transitions)

    def can_submit(self) -> bool:
        return self.input_store.can_submit()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register an observer; returns a callable that removes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def submit(self) -> Optional[RequestState]:
        """
        Start one analysis of the current text and wait for settlement

        Cancelling the caller does not abort the request: it keeps running
        on the loop and the machine still settles.

        Returns:
            The settled state, or None when the submit was rejected
            (request already pending or blank text)
        """
        task = self._begin()
        if task is None:
            return None
        return await asyncio.shield(task)

    def start(self) -> Optional["asyncio.Task[RequestState]"]:
        """Schedule a submit on the running loop for callers that poll `state`"""
        return self._begin()

    @property
    def inflight(self) -> Optional["asyncio.Task[RequestState]"]:
        """Task of the request currently pending, if any"""
        return self._inflight

    def _begin(self) -> Optional["asyncio.Task[RequestState]"]:
        if self.is_pending:
            logger.debug("Submit ignored: a request is already pending")
            return None
        if not self.input_store.can_submit():
            logger.debug("Submit rejected: candidate text is empty")
            return None

        request = AnalysisRequest(text=self.input_store.trimmed)
        loop = asyncio.get_running_loop()
        self._transition(RequestState.pending())
        task = loop.create_task(self._settle(request))
        # the machine owns the task so it cannot be collected while pending
        self._inflight = task
        task.add_done_callback(self._release_inflight)
        return task

    def _release_inflight(self, task: "asyncio.Task[RequestState]") -> None:
        if self._inflight is not task:
            return
        self._inflight = None
        if task.cancelled() and self.is_pending:
            logger.warning("Analysis request was cancelled")
            self._transition(RequestState.failed(ErrorKind.TRANSPORT_ERROR, CANCELLED_MESSAGE))

    async def _settle(self, request: AnalysisRequest) -> RequestState:
        try:
            outcome = await self.client.analyze(request)
        except Exception as e:
            logger.error(
                "Analysis client raised instead of returning a failure",
                exc_info=True,
                extra={"error": str(e), "error_type": type(e).__name__}
            )
            outcome = AnalysisFailure.transport_error(str(e) or type(e).__name__)

        if isinstance(outcome, AnalysisFailure):
            settled = RequestState.failed(outcome.kind, outcome.message)
        else:
            settled = RequestState.succeeded(outcome)
        self._transition(settled)
        return settled

    def _transition(self, new_state: RequestState) -> None:
        check = validate_transition(self._state.status, new_state.status)
        if not check.allowed:
            # Only reachable through a programming error in this class
            raise RuntimeError(check.reason)

        self._transitions.append(StateTransition(self._state.status, new_state.status))
        self._state = new_state
        logger.info(
            f"Request state -> {new_state.status.value}",
            extra={"state": new_state.status.value, "error_kind": new_state.error_kind.value if new_state.error_kind else None}
        )
        self._notify(new_state)

    def _notify(self, state: RequestState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.warning(f"State listener failed: {e}", exc_info=True)

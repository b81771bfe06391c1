"""Inlet type suggestions from an external text-generation service.

The advisor only ever reads computed values; nothing it returns flows back into
the hydraulics. Failures are raised as `AdvisoryError` subclasses, and
`InletTypeAdvisor.suggest_message` turns either outcome into user-facing text.
"""

from __future__ import annotations

import json
import math
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable

import requests
from loguru import logger

from .advisory_settings import endpoint_url, resolve_api_key, resolve_model
from .cascade import InletResult
from .models import Inlet


class AdvisoryError(RuntimeError):
    """Base class for advisory failures."""


class AdvisoryConfigurationError(AdvisoryError):
    """No API key is configured."""


class AdvisoryRequestError(AdvisoryError):
    """The HTTP request failed or the service returned an error status."""


class EmptyAdvisoryResponse(AdvisoryError):
    """The service answered without any suggestion text (empty or blocked)."""


@dataclass(frozen=True, slots=True)
class AdvisoryRequest:
    """Hydraulic summary sent to the advisory service."""

    q_total: float
    gutter_grade: float
    flooding_width: float
    is_low_point: bool

    @classmethod
    def from_result(cls, inlet: Inlet, result: InletResult) -> "AdvisoryRequest":
        return cls(
            q_total=result.q_total,
            gutter_grade=inlet.gutter_grade,
            flooding_width=result.flooding_width,
            is_low_point=result.is_low_point,
        )

    def check(self) -> None:
        """Raise `AdvisoryError` when there is nothing meaningful to ask about."""

        # Gutter grade may legitimately be 0 at a sag.
        if not self.q_total > 0 or math.isnan(self.gutter_grade):
            raise AdvisoryError(
                "Please ensure 'Q Total' is a positive value and 'Gutter Grade' is valid "
                "before suggesting an inlet type."
            )


def build_prompt(request: AdvisoryRequest) -> str:
    return (
        "Given the following hydraulic parameters for a roadway storm drain inlet:\n"
        f"- Total Flow (Q Total) approaching the inlet: {request.q_total:.2f} cfs\n"
        f"- Longitudinal Gutter Grade at inlet: {request.gutter_grade:.2f} %\n"
        f"- Calculated/Allowed Width of Flooding (Spread): {request.flooding_width:.2f} ft\n"
        f"- Is the inlet at a Low Point (Sag): {'Yes' if request.is_low_point else 'No'}\n"
        "Based on typical civil engineering hydraulic design principles (e.g., from a hydraulics manual "
        "like LADOTD or HEC-22), suggest the most suitable *general type* of inlet from these options:\n"
        "1. **Curb-Opening Inlet (e.g., LADOTD CB-06 like)**: Good for continuous grades, less prone to clogging.\n"
        "2. **Grate Inlet (e.g., LADOTD CB-07 like)**: Efficient interception, but can clog.\n"
        "3. **Combination Inlet (Grate + Curb Opening, e.g., LADOTD CB-08 like)**: "
        "High capacity, good for sags or high flow.\n"
        "Provide the suggested type and a brief (1-2 sentences) reasoning. "
        "Consider factors like flow rate, grade, and if it's a sag location."
    )


def _error_detail(response: requests.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return response.reason or "Unknown API error"
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message") or response.reason)
    return response.reason or "Unknown API error"


def _extract_text(body: Any) -> str:
    candidates: Any = body.get("candidates") if isinstance(body, dict) else None
    if candidates:
        parts: Any = (candidates[0].get("content") or {}).get("parts") or []
        if parts and parts[0].get("text"):
            return str(parts[0]["text"])
    message: str = "Failed to get a suggestion. The response was empty or malformed."
    if isinstance(body, dict):
        feedback: Any = body.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            message += f"\nReason: {feedback['blockReason']}"
            if feedback.get("safetyRatings"):
                message += f"\nSafety Ratings: {json.dumps(feedback['safetyRatings'])}"
        elif isinstance(body.get("error"), dict):
            message += f"\nError: {body['error'].get('message')}"
    raise EmptyAdvisoryResponse(message)


class InletTypeAdvisor:
    """
    Thin client for the `generateContent` endpoint.

    Attributes:
        api_key: Key sent with each request; resolved from the environment or
            ADVISORY_API_KEY.txt when not supplied.
        model: Model name used to build the endpoint URL.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_key: str | None = api_key if api_key is not None else resolve_api_key()
        self.model: str = model or resolve_model()
        self.timeout: float = timeout
        self._owns_session: bool = session is None
        self._session: requests.Session = session or requests.Session()

    def close(self) -> None:
        """Close the HTTP session if this advisor created it."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "InletTypeAdvisor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def suggest(self, request: AdvisoryRequest) -> str:
        """Return suggestion text or raise an `AdvisoryError` subclass."""

        request.check()
        if not self.api_key:
            raise AdvisoryConfigurationError(
                "Advisory API key is not configured. Set INLET_ADVISORY_API_KEY (or GEMINI_API_KEY) "
                "or write it to ADVISORY_API_KEY.txt."
            )
        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": build_prompt(request)}]}]}
        logger.info("Requesting inlet type suggestion from {model}", model=self.model)
        try:
            response: requests.Response = self._session.post(
                endpoint_url(self.model),
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise AdvisoryRequestError(f"Advisory request failed: {exc}") from exc
        if not response.ok:
            raise AdvisoryRequestError(
                f"API request failed with status {response.status_code}: {_error_detail(response)}"
            )
        try:
            body: Any = response.json()
        except ValueError as exc:
            raise EmptyAdvisoryResponse("Advisory response was not valid JSON.") from exc
        return _extract_text(body)

    def suggest_message(self, request: AdvisoryRequest) -> str:
        """Return user-facing text for a suggestion or for the failure that prevented it."""

        try:
            text: str = self.suggest(request)
        except AdvisoryError as exc:
            logger.warning("Inlet type suggestion failed: {error}", error=str(exc))
            if isinstance(exc, (AdvisoryRequestError, EmptyAdvisoryResponse)):
                return f"An error occurred while fetching suggestion: {exc}"
            return str(exc)
        return f"Suggestion:\n\n{text}"


class AdvisoryDispatcher:
    """
    Run advisory requests off the calling thread.

    Only the most recent request matters: submitting a new one cancels a pending
    request and suppresses the callback of any request still in flight.
    """

    def __init__(self, advisor: InletTypeAdvisor, executor: ThreadPoolExecutor | None = None) -> None:
        self.advisor: InletTypeAdvisor = advisor
        self._executor: ThreadPoolExecutor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="inlet-advisory"
        )
        self._lock = threading.Lock()
        self._generation: int = 0
        self._pending: Future[str] | None = None

    def submit(self, request: AdvisoryRequest, callback: Callable[[str], None]) -> Future[str]:
        """Queue ``request``; ``callback`` receives the message if it is still the latest request."""

        with self._lock:
            previous: Future[str] | None = self._pending
            self._generation += 1
            generation: int = self._generation
            future: Future[str] = self._executor.submit(self.advisor.suggest_message, request)
            self._pending = future
        # Cancelling runs done-callbacks on this thread, so the lock must be released first.
        if previous is not None and previous.cancel():
            logger.debug("Cancelled superseded advisory request")

        def _deliver(done: Future[str]) -> None:
            if done.cancelled():
                return
            with self._lock:
                current: bool = generation == self._generation
            if not current:
                return
            error: BaseException | None = done.exception()
            if error is not None:
                logger.error("Advisory worker crashed: {error}", error=repr(error))
                callback(f"An error occurred while fetching suggestion: {error}")
                return
            callback(done.result())

        future.add_done_callback(_deliver)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)


__all__: list[str] = [
    "AdvisoryConfigurationError",
    "AdvisoryDispatcher",
    "AdvisoryError",
    "AdvisoryRequest",
    "AdvisoryRequestError",
    "EmptyAdvisoryResponse",
    "InletTypeAdvisor",
    "build_prompt",
]

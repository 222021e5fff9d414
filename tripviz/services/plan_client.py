from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from .trip_result import TripResult, parse_trip_result


logger = logging.getLogger(__name__)


class TripVizError(Exception):
    pass


class PlanRequestError(TripVizError):
    """The external planner failed or could not be reached; message is shown verbatim."""
    pass


class PlannerNotConfiguredError(PlanRequestError):
    pass


class PlanClient:
    def __init__(
        self,
        session: requests.Session | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = (base_url if base_url is not None else settings.TRIP_PLANNER_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.TRIP_PLANNER_TIMEOUT

    @property
    def url(self) -> str:
        if not self.base_url:
            raise PlannerNotConfiguredError("TRIP_PLANNER_URL not configured")
        return f"{self.base_url}/api/trip/plan"

    def plan_trip(self, request: Dict[str, Any]) -> TripResult:
        """
        Post one plan request and parse the planner's trip result.

        No retries: a failed request surfaces as PlanRequestError with the
        planner's own message where it sent one.
        """
        url = self.url
        logger.info(
            "Requesting trip plan %s -> %s -> %s",
            request.get("current_location"),
            request.get("pickup_location"),
            request.get("dropoff_location"),
        )
        try:
            response = self.session.post(url, json=request, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PlanRequestError(f"Failed to reach trip planner: {exc}") from exc

        if response.status_code >= 400:
            try:
                err = response.json()
                message = err.get("detail") or err.get("error") or ""
            except (ValueError, AttributeError):
                message = ""
            message = str(message) or f"Trip planner error: {response.status_code} {response.text}".strip()
            raise PlanRequestError(message)

        try:
            data = response.json()
        except ValueError as exc:
            raise PlanRequestError("Unexpected response format from trip planner") from exc
        return parse_trip_result(data)


@dataclass
class PlanningSession:
    """
    Top-level trip state: the current result, a loading flag and an error.

    Each submission takes a ticket. Only the most recently issued ticket may
    replace the result or set the error, so a slow earlier response can never
    overwrite a newer one. A failure leaves the previous result in place.
    """

    result: Optional[TripResult] = None
    loading: bool = False
    error: Optional[str] = None

    def __post_init__(self) -> None:
        self._tickets = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    def begin(self) -> int:
        with self._lock:
            self._latest = next(self._tickets)
            self.loading = True
            self.error = None
            return self._latest

    def _is_current(self, ticket: int) -> bool:
        if ticket != self._latest:
            logger.info("Dropping stale plan response #%d (latest is #%d)", ticket, self._latest)
            return False
        return True

    def complete(self, ticket: int, result: TripResult) -> bool:
        with self._lock:
            if not self._is_current(ticket):
                return False
            self.result = result
            self.loading = False
            return True

    def fail(self, ticket: int, message: str) -> bool:
        with self._lock:
            if not self._is_current(ticket):
                return False
            self.error = message
            self.loading = False
            return True

    def submit(self, client: PlanClient, request: Dict[str, Any]) -> Optional[TripResult]:
        ticket = self.begin()
        try:
            result = client.plan_trip(request)
        except PlanRequestError as exc:
            logger.warning("Trip plan failed: %s", exc)
            self.fail(ticket, str(exc))
            return None
        self.complete(ticket, result)
        return self.result

from unittest.mock import Mock

import pytest
import requests

from tripviz.services.plan_client import (
    PlanClient,
    PlannerNotConfiguredError,
    PlanningSession,
    PlanRequestError,
)
from tripviz.services.trip_result import TripResult


def _request():
    return {
        "current_location": "Chicago, IL",
        "pickup_location": "Chicago, IL",
        "dropoff_location": "Cincinnati, OH",
        "cycle_used_hours": 10.0,
    }


def _response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    response.text = ""
    return response


def test_plan_trip_success():
    session = Mock()
    session.post.return_value = _response(payload={
        "distance_miles": 300,
        "estimated_drive_hours": 5,
        "route": {"geometry": [[-87.6, 41.8], [-84.5, 39.1]], "stops": [], "waypoint_coords": []},
        "eld_logs": [{"day": 1, "segments": [{"status": "driving", "hours": 5}]}],
    })

    client = PlanClient(session=session, base_url="http://planner.test/", timeout=5)
    trip = client.plan_trip(_request())

    session.post.assert_called_once_with(
        "http://planner.test/api/trip/plan", json=_request(), timeout=5
    )
    assert trip.distance_miles == 300
    assert trip.route.geometry == ((-87.6, 41.8), (-84.5, 39.1))


def test_plan_trip_uses_settings(settings):
    settings.TRIP_PLANNER_URL = "http://configured.test"
    settings.TRIP_PLANNER_TIMEOUT = 12
    client = PlanClient(session=Mock())
    assert client.url == "http://configured.test/api/trip/plan"
    assert client.timeout == 12


def test_plan_trip_error_message_is_verbatim():
    session = Mock()
    session.post.return_value = _response(400, {"detail": "Could not geocode pickup location"})
    client = PlanClient(session=session, base_url="http://planner.test")
    with pytest.raises(PlanRequestError, match="^Could not geocode pickup location$"):
        client.plan_trip(_request())


def test_plan_trip_error_without_json_body():
    session = Mock()
    response = _response(502)
    response.json.side_effect = ValueError("no json")
    response.text = "Bad Gateway"
    session.post.return_value = response
    client = PlanClient(session=session, base_url="http://planner.test")
    with pytest.raises(PlanRequestError, match="Trip planner error: 502 Bad Gateway"):
        client.plan_trip(_request())


def test_plan_trip_network_failure():
    session = Mock()
    session.post.side_effect = requests.ConnectionError("connection refused")
    client = PlanClient(session=session, base_url="http://planner.test")
    with pytest.raises(PlanRequestError, match="connection refused"):
        client.plan_trip(_request())
    assert session.post.call_count == 1


def test_plan_trip_requires_url():
    client = PlanClient(session=Mock(), base_url="")
    with pytest.raises(PlannerNotConfiguredError):
        client.plan_trip(_request())


def test_session_ignores_stale_responses():
    session = PlanningSession()
    first = session.begin()
    second = session.begin()
    newer, older = TripResult(distance_miles=2), TripResult(distance_miles=1)

    assert session.complete(second, newer)
    assert not session.complete(first, older)
    assert session.result is newer
    assert not session.fail(first, "timeout")
    assert session.error is None


def test_session_failure_keeps_previous_result():
    session = PlanningSession()
    previous = TripResult(distance_miles=5)
    session.complete(session.begin(), previous)

    ticket = session.begin()
    assert session.loading
    session.fail(ticket, "Planner unavailable")
    assert session.result is previous
    assert session.error == "Planner unavailable"
    assert not session.loading


def test_session_submit():
    client = Mock()
    client.plan_trip.side_effect = PlanRequestError("Route not found")
    session = PlanningSession(result=TripResult(distance_miles=1))

    assert session.submit(client, _request()) is None
    assert session.error == "Route not found"
    assert session.result.distance_miles == 1

    client.plan_trip.side_effect = None
    client.plan_trip.return_value = TripResult(distance_miles=9)
    assert session.submit(client, _request()).distance_miles == 9
    assert session.error is None

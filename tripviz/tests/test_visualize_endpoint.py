from django.urls import reverse

from tripviz.services.presentation_service import NO_DRIVE_TIME_MESSAGE
from tripviz.views import EXAMPLE_TRIP


def test_visualize_trip(client):
    res = client.post(reverse("visualize"), data=EXAMPLE_TRIP, content_type="application/json")
    assert res.status_code == 200
    data = res.json()
    assert data["banner"] is None
    assert [s["label"] for s in data["summary"]] == ["Total Distance", "Drive Time", "Trip Days", "Stops"]
    assert data["summary"][2] == {"label": "Trip Days", "value": "1", "unit": "day"}

    chart = data["charts"][0]
    assert chart["totals"]["driving"] == 10
    assert chart["totals"]["sleeper"] == 0
    assert chart["summary"] == "Driving: 10.0h • On Duty: 2.0h"
    assert chart["d"].startswith("M 100 170 ")
    assert len(chart["regions"]) == 6

    assert data["map"]["placeholder"] is False
    assert data["map"]["path"][0] == [41.8781, -87.6298]
    assert [m["type"] for m in data["map"]["markers"]] == ["current", "pickup", "dropoff", "fuel"]

    assert [t["label"] for t in data["timeline"]] == ["Chicago, IL", "Fuel Stop", "Cincinnati, OH"]
    assert data["timeline"][1]["mile_badge"] == "Mi 320"
    assert data["timeline"][-1]["has_connector"] is False


def test_visualize_without_drive_time_shows_banner(client):
    payload = dict(EXAMPLE_TRIP, eld_logs=[])
    res = client.post(reverse("visualize"), data=payload, content_type="application/json")
    assert res.status_code == 200
    data = res.json()
    assert data["banner"] == NO_DRIVE_TIME_MESSAGE
    assert data["charts"] == []
    assert data["map"]["placeholder"] is False


def test_visualize_empty_route(client):
    payload = dict(EXAMPLE_TRIP, route={"geometry": [], "stops": [], "waypoint_coords": []})
    res = client.post(reverse("visualize"), data=payload, content_type="application/json")
    assert res.status_code == 200
    assert res.json()["map"] == {"path": [], "viewport": None, "markers": [], "placeholder": True}


def test_visualize_malformed_payload_degrades(client):
    res = client.post(reverse("visualize"), data=[1, 2, 3], content_type="application/json")
    assert res.status_code == 200
    data = res.json()
    assert data["banner"] == NO_DRIVE_TIME_MESSAGE
    assert data["map"]["placeholder"] is True


def test_map_html(client):
    res = client.post(reverse("trip-map"), data=EXAMPLE_TRIP, content_type="application/json")
    assert res.status_code == 200
    assert res["Content-Type"].startswith("text/html")
    assert b"fitBounds" in res.content


def test_eld_chart_svg(client):
    url = reverse("eld-chart", kwargs={"day": 1})
    res = client.post(url, data=EXAMPLE_TRIP, content_type="application/json")
    assert res.status_code == 200
    assert res["Content-Type"] == "image/svg+xml"
    assert res.content.startswith(b"<svg")


def test_eld_chart_missing_day(client):
    url = reverse("eld-chart", kwargs={"day": 3})
    res = client.post(url, data=EXAMPLE_TRIP, content_type="application/json")
    assert res.status_code == 404


def test_eld_chart_svg_with_hovered_interval(client):
    url = reverse("eld-chart", kwargs={"day": 1}) + "?hover=1"
    res = client.post(url, data=EXAMPLE_TRIP, content_type="application/json")
    assert res.status_code == 200
    assert 'class="eld-hover-info">Driving: 5.0h (1:00 AM – 6:00 AM)</text>' in res.content.decode()


def test_eld_chart_svg_rejects_unknown_interval(client):
    for hover in ("6", "-1", "abc"):
        url = reverse("eld-chart", kwargs={"day": 1}) + f"?hover={hover}"
        res = client.post(url, data=EXAMPLE_TRIP, content_type="application/json")
        assert res.status_code == 400

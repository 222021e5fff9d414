from django.http import HttpResponse
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiExample, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .serializers import (
    PlanTripRequestSerializer,
    TripResultSerializer,
    VisualizationResponseSerializer,
)
from .services.eld_chart_service import build_day_chart, render_day_chart
from .services.map_surface import RouteMapView
from .services.plan_client import PlanClient, PlanRequestError, PlannerNotConfiguredError
from .services.presentation_service import visualize
from .services.trip_result import parse_trip_result


EXAMPLE_TRIP = {
    "distance_miles": 612.4,
    "estimated_drive_hours": 10.0,
    "route": {
        "geometry": [[-87.6298, 41.8781], [-86.1581, 39.7684], [-84.512, 39.1031]],
        "stops": [
            {"type": "pickup", "hour": 1, "mile": 0, "name": "Chicago, IL"},
            {"type": "fuel", "hour": 5.5, "mile": 320},
            {"type": "dropoff", "hour": 11, "mile": 612.4, "name": "Cincinnati, OH"},
        ],
        "waypoint_coords": [[-87.6298, 41.8781], [-87.6298, 41.8781], [-84.512, 39.1031]],
    },
    "eld_logs": [
        {
            "day": 1,
            "segments": [
                {"status": "on_duty", "hours": 1},
                {"status": "driving", "hours": 5},
                {"status": "off_duty", "hours": 0.5},
                {"status": "driving", "hours": 5},
                {"status": "on_duty", "hours": 1},
                {"status": "off_duty", "hours": 11.5},
            ],
        }
    ],
}


def _trip_from_request(request):
    data = request.data if isinstance(request.data, dict) else {}
    return parse_trip_result(data)


class HealthCheckView(APIView):
    authentication_classes = []
    permission_classes = []

    @extend_schema(
        summary="Health check",
        description="Check if the API is running and healthy.",
        responses={
            200: {
                "type": "object",
                "properties": {
                    "status": {"type": "string", "example": "ok"}
                }
            }
        },
        tags=["Health"]
    )
    def get(self, request):
        return Response({"status": "ok"})


class VisualizeTripView(APIView):
    @extend_schema(
        summary="Project a trip result",
        description="""
        Project an already-computed trip result into drawable geometry.

        **Returns:**
        - `summary`: distance, drive time, trip days and stop count
        - `map`: route path in [lat, lon] order, viewport bounds with 50px padding, and markers
        - `timeline`: planned stops in chronological order
        - `charts`: per-day duty-status step line (SVG path data), totals and hover regions
        - `banner`: set when no day log carries any hours (out of hours for the cycle)

        Intermediate stops without coordinates are placed assuming constant speed
        along the route. Those positions are estimates for display only.
        """,
        request=TripResultSerializer,
        responses={200: VisualizationResponseSerializer},
        examples=[OpenApiExample("Trip result", value=EXAMPLE_TRIP, request_only=True)],
        tags=["Visualization"]
    )
    def post(self, request):
        return Response(visualize(_trip_from_request(request)))


class TripMapView(APIView):
    @extend_schema(
        summary="Render the route map",
        description="Render the trip route, waypoints and stops as a standalone Leaflet map (HTML).",
        request=TripResultSerializer,
        responses={(200, "text/html"): OpenApiTypes.STR},
        tags=["Visualization"]
    )
    def post(self, request):
        view = RouteMapView()
        view.show(_trip_from_request(request).route)
        html = view.render()
        view.surface.destroy()
        return HttpResponse(html, content_type="text/html; charset=utf-8")


class EldChartView(APIView):
    @extend_schema(
        summary="Render one day's ELD chart",
        description="Render the duty-status grid for a single trip day as SVG.",
        request=TripResultSerializer,
        parameters=[
            OpenApiParameter(
                name="day",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.PATH,
                description="Trip day number (starting at 1)",
            ),
            OpenApiParameter(
                name="hover",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Render with this interval (0-based) hovered; its description replaces the summary line",
                required=False
            ),
        ],
        responses={
            (200, "image/svg+xml"): OpenApiTypes.STR,
            400: {
                "type": "object",
                "properties": {
                    "detail": {"type": "string"}
                }
            },
            404: {
                "type": "object",
                "properties": {
                    "detail": {"type": "string"}
                }
            }
        },
        tags=["Visualization"]
    )
    def post(self, request, day):
        trip = _trip_from_request(request)
        log = next((log for log in trip.day_logs if log.day == day), None)
        if log is None:
            return Response({"detail": f"No log for day {day}"}, status=status.HTTP_404_NOT_FOUND)
        chart = build_day_chart(log)
        hover = request.query_params.get("hover")
        if hover is not None:
            try:
                chart.enter_region(int(hover))
            except (ValueError, IndexError):
                return Response({"detail": f"Invalid hover interval: {hover}"}, status=status.HTTP_400_BAD_REQUEST)
        svg = render_day_chart(chart)
        return HttpResponse(svg, content_type="image/svg+xml")


class PlanTripView(APIView):
    @extend_schema(
        summary="Plan and project a trip",
        description="""
        Forward the request to the external trip planner and project its result.

        The planner computes route, stops and duty-status logs; this endpoint only
        turns the result into drawable geometry (same response as `/visualize/`).

        **Errors:**
        - planner failures are returned verbatim with status 502, no retry
        - 503 when no planner URL is configured
        """,
        request=PlanTripRequestSerializer,
        responses={
            200: VisualizationResponseSerializer,
            400: {
                "type": "object",
                "properties": {
                    "field_name": {"type": "array", "items": {"type": "string"}}
                }
            },
            502: {
                "type": "object",
                "properties": {
                    "detail": {"type": "string"}
                }
            },
            503: {
                "type": "object",
                "properties": {
                    "detail": {"type": "string"}
                }
            }
        },
        examples=[
            OpenApiExample(
                "Example Request",
                value={
                    "current_location": "Chicago, IL",
                    "pickup_location": "Chicago, IL",
                    "dropoff_location": "Cincinnati, OH",
                    "cycle_used_hours": 10.0
                },
                request_only=True
            ),
        ],
        tags=["Trip Planning"]
    )
    def post(self, request):
        serializer = PlanTripRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        client = PlanClient()
        try:
            trip = client.plan_trip(dict(serializer.validated_data))
        except PlannerNotConfiguredError as exc:
            return Response(
                {"detail": f"Trip planner not configured: {exc}"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        except PlanRequestError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(visualize(trip))

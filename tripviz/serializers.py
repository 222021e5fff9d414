from rest_framework import serializers


class PlanTripRequestSerializer(serializers.Serializer):
    """
    Request payload forwarded to the external trip planner.

    Locations are free-text addresses; the planner geocodes them and returns
    the route, stops and daily duty-status logs.
    """
    current_location = serializers.CharField(
        max_length=255,
        help_text="Driver's current location (address or place name)"
    )
    pickup_location = serializers.CharField(
        max_length=255,
        help_text="Pickup location (address or place name)"
    )
    dropoff_location = serializers.CharField(
        max_length=255,
        help_text="Drop-off location (address or place name)"
    )
    cycle_used_hours = serializers.FloatField(
        min_value=0,
        max_value=70,
        help_text="Hours already used in the current 70-hour/8-day cycle"
    )


class DutySegmentSerializer(serializers.Serializer):
    """One duty-status period; segments of a day are laid end to end from midnight."""
    status = serializers.CharField(
        help_text="off_duty, sleeper, driving or on_duty (anything else is drawn as off_duty)"
    )
    hours = serializers.FloatField(
        help_text="Duration of the period in hours"
    )


class DayLogSerializer(serializers.Serializer):
    day = serializers.IntegerField(help_text="Trip day, starting at 1")
    segments = DutySegmentSerializer(many=True)


class StopSerializer(serializers.Serializer):
    type = serializers.CharField(help_text="pickup, dropoff, fuel or rest")
    hour = serializers.FloatField(help_text="Elapsed trip hour")
    mile = serializers.FloatField(required=False, help_text="Mile marker")
    name = serializers.CharField(required=False)
    google_maps_url = serializers.URLField(required=False)
    lat = serializers.FloatField(required=False)
    lon = serializers.FloatField(required=False)


class TripRouteSerializer(serializers.Serializer):
    geometry = serializers.ListField(
        child=serializers.ListField(child=serializers.FloatField(), min_length=2, max_length=2),
        help_text="Route as [longitude, latitude] pairs (an encoded polyline string is also accepted)"
    )
    stops = StopSerializer(many=True)
    waypoint_coords = serializers.ListField(
        child=serializers.ListField(child=serializers.FloatField(), min_length=2, max_length=2),
        help_text="[longitude, latitude] of current location, pickup and drop-off, in that order"
    )


class TripResultSerializer(serializers.Serializer):
    """
    A trip result as produced by the planner.

    Used for documentation; incoming results are parsed leniently so that
    malformed parts degrade the drawing instead of rejecting the request.
    """
    distance_miles = serializers.FloatField()
    estimated_drive_hours = serializers.FloatField()
    route = TripRouteSerializer()
    eld_logs = DayLogSerializer(many=True)


class SummaryStatSerializer(serializers.Serializer):
    label = serializers.CharField()
    value = serializers.CharField()
    unit = serializers.CharField()


class ViewportSerializer(serializers.Serializer):
    bounds = serializers.JSONField(help_text="[[south, west], [north, east]]")
    padding = serializers.ListField(child=serializers.IntegerField())


class MapMarkerSerializer(serializers.Serializer):
    type = serializers.CharField()
    lat = serializers.FloatField()
    lon = serializers.FloatField()
    label = serializers.CharField()
    z_index_offset = serializers.IntegerField()
    hour = serializers.FloatField(allow_null=True)
    mile = serializers.FloatField(allow_null=True)
    map_link = serializers.CharField(allow_null=True)
    estimated = serializers.BooleanField(
        help_text="Placed by constant-speed estimate along the route; display only"
    )
    popup = serializers.CharField(help_text="Popup HTML")
    hover = serializers.CharField()


class RouteProjectionSerializer(serializers.Serializer):
    path = serializers.JSONField(help_text="Route as [latitude, longitude] pairs")
    viewport = ViewportSerializer(allow_null=True)
    markers = MapMarkerSerializer(many=True)
    placeholder = serializers.BooleanField(help_text="True when there is no route to draw")


class TimelineEntrySerializer(serializers.Serializer):
    type = serializers.CharField()
    emoji = serializers.CharField()
    color = serializers.CharField()
    label = serializers.CharField()
    hour_badge = serializers.CharField()
    mile_badge = serializers.CharField(allow_null=True)
    map_link = serializers.CharField(allow_null=True)
    has_connector = serializers.BooleanField()


class HoverRegionSerializer(serializers.Serializer):
    x = serializers.FloatField()
    y = serializers.FloatField()
    width = serializers.FloatField()
    height = serializers.FloatField()
    status = serializers.CharField()
    description = serializers.CharField()


class DayChartSerializer(serializers.Serializer):
    day = serializers.IntegerField()
    totals = serializers.DictField(child=serializers.FloatField())
    intervals = serializers.JSONField(help_text="[{status, start, end}] in hours since midnight")
    d = serializers.CharField(help_text="SVG path data for the step line")
    regions = HoverRegionSerializer(many=True)
    summary = serializers.CharField(help_text="Text shown when nothing is hovered")


class VisualizationResponseSerializer(serializers.Serializer):
    summary = SummaryStatSerializer(many=True)
    banner = serializers.CharField(allow_null=True)
    map = RouteProjectionSerializer()
    timeline = TimelineEntrySerializer(many=True)
    charts = DayChartSerializer(many=True)

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from html import escape
from typing import Dict, List, Optional, Sequence, Tuple

from .interaction import describe_marker, format_number
from .kinds import WAYPOINT_KINDS, StopKind
from .trip_result import LonLat, Stop, TripRoute


logger = logging.getLogger(__name__)

# (latitude, longitude), the order the map surface expects
LatLon = Tuple[float, float]

ROUTE_COLOR = "#06b6d4"
FIT_PADDING_PX = 50


@dataclass(frozen=True)
class PathStyle:
    color: str
    weight: int
    opacity: float
    line_cap: str = "round"
    line_join: str = "round"


# Drawn in this order: a wide faint stroke under a narrow solid one (glow)
GLOW_STYLES = (
    PathStyle(color=ROUTE_COLOR, weight=7, opacity=0.25),
    PathStyle(color=ROUTE_COLOR, weight=4, opacity=0.9),
)


@dataclass(frozen=True)
class Viewport:
    south_west: LatLon
    north_east: LatLon
    padding: Tuple[int, int] = (FIT_PADDING_PX, FIT_PADDING_PX)

    @property
    def bounds(self) -> List[List[float]]:
        return [list(self.south_west), list(self.north_east)]


def project_route(geometry: Sequence[LonLat]) -> List[LatLon]:
    """Swap planner (lon, lat) pairs into map (lat, lon) order, keeping sequence."""
    return [(lat, lon) for lon, lat in geometry]


def fit_viewport(points: Sequence[LatLon], padding: int = FIT_PADDING_PX) -> Optional[Viewport]:
    if not points:
        return None
    lats = [p[0] for p in points]
    lons = [p[1] for p in points]
    return Viewport(
        south_west=(min(lats), min(lons)),
        north_east=(max(lats), max(lons)),
        padding=(padding, padding),
    )


@dataclass(frozen=True)
class MapMarker:
    kind: StopKind
    position: LatLon
    label: str
    z_index_offset: int
    hour: Optional[float] = None
    mile: Optional[float] = None
    map_link: Optional[str] = None
    # True when placed by the constant-speed estimate rather than real coordinates
    estimated: bool = False

    @property
    def popup_html(self) -> str:
        lines = [f"<strong>{escape(self.label)}</strong>"]
        if self.hour is not None:
            detail = f"Hour {format_number(self.hour)}"
            if self.mile:
                detail += f" • Mile {format_number(self.mile)}"
            lines.append(detail)
        html = "<br/>".join(lines)
        if self.map_link:
            html += (
                f'<br/><a href="{escape(self.map_link, quote=True)}" target="_blank" '
                f'rel="noopener noreferrer" style="color: {ROUTE_COLOR}; text-decoration: none;">'
                f"View on Google Maps</a>"
            )
        return f'<div class="map-popup">{html}</div>'

    @property
    def hover_text(self) -> str:
        return describe_marker(self)

    def as_dict(self) -> Dict:
        return {
            "type": self.kind.value,
            "lat": self.position[0],
            "lon": self.position[1],
            "label": self.label,
            "z_index_offset": self.z_index_offset,
            "hour": self.hour,
            "mile": self.mile,
            "map_link": self.map_link,
            "estimated": self.estimated,
            "popup": self.popup_html,
            "hover": self.hover_text,
        }


def resolve_waypoints(waypoints: Sequence[Optional[LonLat]]) -> List[MapMarker]:
    """Markers for current location, pickup and dropoff, by position."""
    markers = []
    for kind, coord in zip(WAYPOINT_KINDS, waypoints):
        if coord is None:
            continue
        lon, lat = coord
        markers.append(
            MapMarker(
                kind=kind,
                position=(lat, lon),
                label=kind.map_label,
                z_index_offset=kind.z_index_offset,
            )
        )
    return markers


def proportional_index(hour: float, total_span: float, point_count: int) -> int:
    """
    Index of the route point reached after `hour` of a `total_span`-hour trip.

    Assumes constant speed along the whole path, so the result is only a
    display estimate. A zero span counts as one hour.
    """
    if point_count <= 0:
        return 0
    span = total_span or 1
    fraction = min(hour / span, 1)
    index = min(math.floor(fraction * (point_count - 1)), point_count - 1)
    return max(index, 0)


def resolve_stop_markers(
    stops: Sequence[Stop],
    route_points: Sequence[LatLon],
    waypoint_kinds: Sequence[StopKind] = (),
) -> List[MapMarker]:
    """
    Place fuel/rest stops (and pickup/dropoff stops with no waypoint marker).

    Explicit stop coordinates win. Otherwise the stop is pinned to the route
    point at the fraction of the trip its hour represents, measured against
    the final stop's hour.
    """
    if not stops:
        return []
    total_span = stops[-1].hour or 1
    markers = []
    for stop in stops:
        if stop.type in waypoint_kinds:
            continue
        estimated = not stop.has_coordinates
        if estimated:
            if not route_points:
                logger.debug("No route to place %s stop at hour %s", stop.type.value, stop.hour)
                continue
            position = route_points[proportional_index(stop.hour, total_span, len(route_points))]
        else:
            position = (stop.lat, stop.lon)
        markers.append(
            MapMarker(
                kind=stop.type,
                position=position,
                label=stop.name or stop.type.map_label,
                z_index_offset=StopKind.FUEL.z_index_offset,
                hour=stop.hour,
                mile=stop.mile,
                map_link=stop.map_link,
                estimated=estimated,
            )
        )
    return markers


@dataclass(frozen=True)
class RouteProjection:
    points: Tuple[LatLon, ...]
    viewport: Optional[Viewport]
    markers: Tuple[MapMarker, ...]

    @property
    def is_empty(self) -> bool:
        return not self.points

    def as_dict(self) -> Dict:
        return {
            "path": [list(p) for p in self.points],
            "viewport": (
                {"bounds": self.viewport.bounds, "padding": list(self.viewport.padding)}
                if self.viewport
                else None
            ),
            "markers": [m.as_dict() for m in self.markers],
            "placeholder": self.is_empty,
        }


def project_trip_route(route: TripRoute) -> RouteProjection:
    """
    Everything the map draws for one route. An empty geometry yields no
    path, no viewport and no markers.
    """
    points = project_route(route.geometry)
    if not points:
        return RouteProjection((), None, ())
    waypoint_markers = resolve_waypoints(route.waypoints)
    placed = tuple(m.kind for m in waypoint_markers)
    stop_markers = resolve_stop_markers(route.stops, points, waypoint_kinds=placed)
    return RouteProjection(
        points=tuple(points),
        viewport=fit_viewport(points),
        markers=tuple(waypoint_markers + stop_markers),
    )

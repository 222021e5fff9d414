from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

import polyline

from .kinds import DutyStatus, StopKind


logger = logging.getLogger(__name__)

# (longitude, latitude), the order the planner sends
LonLat = Tuple[float, float]


@dataclass(frozen=True)
class DutySegment:
    status: DutyStatus
    hours: float


@dataclass(frozen=True)
class DayLog:
    day: int
    segments: Tuple[DutySegment, ...] = ()

    @property
    def total_hours(self) -> float:
        return sum(s.hours for s in self.segments)


@dataclass(frozen=True)
class Stop:
    type: StopKind
    hour: float
    mile: Optional[float] = None
    name: Optional[str] = None
    map_link: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None


@dataclass(frozen=True)
class TripRoute:
    geometry: Tuple[LonLat, ...] = ()
    stops: Tuple[Stop, ...] = ()
    waypoints: Tuple[Optional[LonLat], ...] = ()


@dataclass(frozen=True)
class TripResult:
    distance_miles: float = 0.0
    estimated_drive_hours: float = 0.0
    route: TripRoute = field(default_factory=TripRoute)
    day_logs: Tuple[DayLog, ...] = ()

    @property
    def has_drive_time(self) -> bool:
        return any(log.total_hours > 0 for log in self.day_logs)

    @property
    def trip_days(self) -> int:
        return len(self.day_logs)

    @property
    def intermediate_stop_count(self) -> int:
        return sum(1 for s in self.route.stops if s.type in (StopKind.FUEL, StopKind.REST))


def _number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _pair(value: Any) -> Optional[LonLat]:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None
    lon = _number(value[0], None)
    lat = _number(value[1], None)
    if lon is None or lat is None:
        return None
    return lon, lat


def _geometry(raw: Any) -> Tuple[LonLat, ...]:
    # Encoded polyline strings decode to (lat, lon) pairs
    if isinstance(raw, str):
        try:
            decoded = polyline.decode(raw)
        except (ValueError, IndexError, TypeError):
            logger.debug("Undecodable route polyline, drawing no route")
            return ()
        return tuple((lon, lat) for lat, lon in decoded)
    if isinstance(raw, dict):
        raw = raw.get("coordinates", [])
    if not isinstance(raw, (list, tuple)):
        return ()
    pairs = []
    for item in raw:
        pair = _pair(item)
        if pair is None:
            logger.debug("Dropping malformed route point %r", item)
            continue
        pairs.append(pair)
    return tuple(pairs)


def _segment(raw: Any) -> DutySegment:
    raw = raw if isinstance(raw, dict) else {}
    hours = _number(raw.get("hours"))
    if hours < 0:
        hours = 0.0
    return DutySegment(status=DutyStatus.coerce(raw.get("status")), hours=hours)


def _day_log(raw: Any, position: int) -> DayLog:
    raw = raw if isinstance(raw, dict) else {}
    day = _number(raw.get("day"), None)
    segments = raw.get("segments") or []
    if not isinstance(segments, list):
        segments = []
    return DayLog(
        day=int(day) if day is not None else position + 1,
        segments=tuple(_segment(s) for s in segments),
    )


def _stop(raw: Any) -> Stop:
    raw = raw if isinstance(raw, dict) else {}
    hour = _number(raw.get("hour"))
    return Stop(
        type=StopKind.coerce(raw.get("type")),
        hour=max(hour, 0.0),
        mile=_number(raw.get("mile"), None),
        name=_text(raw.get("name")),
        map_link=_text(raw.get("google_maps_url")),
        lat=_number(raw.get("lat"), None),
        lon=_number(raw.get("lon"), None),
    )


def parse_trip_result(payload: Any) -> TripResult:
    """
    Build an immutable TripResult from the planner's JSON response.

    Malformed content never raises. Missing numbers become 0, unknown duty
    statuses become off duty, bad route points are dropped and a missing
    route yields an empty geometry (no path drawn).
    """
    payload = payload if isinstance(payload, dict) else {}
    route = payload.get("route") if isinstance(payload.get("route"), dict) else {}
    stops = route.get("stops") if isinstance(route.get("stops"), list) else []
    waypoints = route.get("waypoint_coords") if isinstance(route.get("waypoint_coords"), list) else []
    logs = payload.get("eld_logs") if isinstance(payload.get("eld_logs"), list) else []

    return TripResult(
        distance_miles=_number(payload.get("distance_miles")),
        estimated_drive_hours=_number(payload.get("estimated_drive_hours")),
        route=TripRoute(
            geometry=_geometry(route.get("geometry")),
            stops=tuple(_stop(s) for s in stops),
            # keep positions so index 0/1/2 stays current/pickup/dropoff
            waypoints=tuple(_pair(w) for w in waypoints),
        ),
        day_logs=tuple(_day_log(log, i) for i, log in enumerate(logs)),
    )

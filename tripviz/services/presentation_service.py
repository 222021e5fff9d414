from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from .eld_chart_service import AxisProjector, build_day_chart
from .interaction import format_number
from .route_map_service import project_trip_route
from .trip_result import Stop, TripResult


NO_DRIVE_TIME_MESSAGE = "No driving time available. You may be out of hours for this cycle."


@dataclass(frozen=True)
class TimelineEntry:
    type: str
    emoji: str
    color: str
    label: str
    hour_badge: str
    mile_badge: Optional[str]
    map_link: Optional[str]
    has_connector: bool


def build_timeline(stops: Sequence[Stop]) -> List[TimelineEntry]:
    """Chronological stop list; every entry but the last is joined to the next."""
    entries = []
    for i, stop in enumerate(stops):
        kind = stop.type
        entries.append(
            TimelineEntry(
                type=kind.value,
                emoji=kind.emoji,
                color=kind.color,
                label=stop.name or kind.timeline_label,
                hour_badge=f"Hr {format_number(stop.hour)}",
                mile_badge=f"Mi {format_number(stop.mile)}" if stop.mile is not None else None,
                map_link=stop.map_link,
                has_connector=i < len(stops) - 1,
            )
        )
    return entries


@dataclass(frozen=True)
class SummaryStat:
    label: str
    value: str
    unit: str


def summarize(trip: TripResult) -> List[SummaryStat]:
    days = trip.trip_days
    stops = trip.intermediate_stop_count
    return [
        SummaryStat("Total Distance", format_number(trip.distance_miles), "miles"),
        SummaryStat("Drive Time", format_number(trip.estimated_drive_hours), "hours"),
        SummaryStat("Trip Days", str(days), "day" if days == 1 else "days"),
        SummaryStat("Stops", str(stops), "stop" if stops == 1 else "stops"),
    ]


def visualize(trip: TripResult, projector: AxisProjector | None = None) -> Dict[str, Any]:
    """
    Everything derived from one trip result, recomputed from scratch.

    When no day log carries any hours the charts and timeline are replaced
    by an informational banner; the map is still drawn.
    """
    projector = projector or AxisProjector()
    has_drive_time = trip.has_drive_time
    return {
        "summary": [asdict(s) for s in summarize(trip)],
        "banner": None if has_drive_time else NO_DRIVE_TIME_MESSAGE,
        "map": project_trip_route(trip.route).as_dict(),
        "timeline": [asdict(e) for e in build_timeline(trip.route.stops)] if has_drive_time else [],
        "charts": [build_day_chart(log, projector).as_dict() for log in trip.day_logs] if has_drive_time else [],
    }

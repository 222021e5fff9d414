from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
from typing import Dict, Iterable, List, Tuple

from .interaction import HoverState, describe_interval, hour_axis_label
from .kinds import STATUS_ROWS, DutyStatus
from .trip_result import DayLog, DutySegment


HOURS_PER_DAY = 24.0
LINE_COLOR = "#06b6d4"

# Inline handlers keep the standalone SVG interactive without external scripts
SHOW_HOVER_JS = (
    "this.ownerSVGElement.querySelector('.eld-hover-info').textContent"
    "=this.getAttribute('data-hover')"
)
RESET_HOVER_JS = (
    "(this.ownerSVGElement || this).querySelector('.eld-hover-info').textContent"
    "=(this.ownerSVGElement || this).getAttribute('data-summary')"
)


@dataclass(frozen=True)
class Interval:
    status: DutyStatus
    start_hour: float  # hours since midnight; may run past 24 on malformed logs
    end_hour: float

    @property
    def duration(self) -> float:
        return self.end_hour - self.start_hour

    @property
    def row(self) -> int:
        return self.status.row

    @property
    def clipped_end_hour(self) -> float:
        return min(self.end_hour, HOURS_PER_DAY)


@dataclass(frozen=True)
class Accumulation:
    intervals: Tuple[Interval, ...]
    totals: Dict[DutyStatus, float]

    @property
    def total_hours(self) -> float:
        return sum(self.totals.values())


def accumulate(segments: Iterable[DutySegment]) -> Accumulation:
    """
    Lay segments end to end starting at midnight and total hours per status.

    Segments are strictly sequential: each interval starts where the previous
    one ended. Totals always carry all four statuses, and report true hours
    even when the day overruns 24.
    """
    totals = {status: 0.0 for status in STATUS_ROWS}
    intervals: List[Interval] = []
    t = 0.0
    for seg in segments:
        status = DutyStatus.coerce(seg.status)
        intervals.append(Interval(status, t, t + seg.hours))
        totals[status] += seg.hours
        t += seg.hours
    return Accumulation(tuple(intervals), totals)


@dataclass(frozen=True)
class AxisProjector:
    """Maps (hour 0-24, status row 0-3) onto the chart's pixel grid."""

    left: float = 100
    right: float = 50
    top: float = 30
    row_height: float = 40
    total_width: float = 900

    @property
    def chart_width(self) -> float:
        return self.total_width - self.left - self.right

    @property
    def chart_bottom(self) -> float:
        return self.top + self.row_height * len(STATUS_ROWS)

    @property
    def total_height(self) -> float:
        return self.chart_bottom + 30

    def hour_to_x(self, hour: float) -> float:
        return self.left + (hour / HOURS_PER_DAY) * self.chart_width

    def row_to_y(self, row: int) -> float:
        return self.top + row * self.row_height + self.row_height / 2

    def row_top(self, row: int) -> float:
        return self.top + row * self.row_height

    def gridlines(self) -> List[Tuple[int, float, float]]:
        """(hour, x, stroke width) for each hour line, heavier every 6 hours."""
        return [
            (h, self.hour_to_x(h), 1.5 if h % 6 == 0 else 0.5)
            for h in range(int(HOURS_PER_DAY) + 1)
        ]

    def axis_labels(self) -> List[Tuple[float, str]]:
        return [
            (self.hour_to_x(h), hour_axis_label(h))
            for h in range(0, int(HOURS_PER_DAY) + 1, 2)
        ]

    def row_dividers(self) -> List[float]:
        return [self.row_top(i) for i in range(len(STATUS_ROWS) + 1)]


@dataclass(frozen=True)
class HoverRegion:
    x: float
    y: float
    width: float
    height: float
    status: DutyStatus
    description: str


@dataclass(frozen=True)
class StepPath:
    # ("M" | "L", x, y)
    vertices: Tuple[Tuple[str, float, float], ...] = ()
    regions: Tuple[HoverRegion, ...] = ()
    dots: Tuple[Tuple[float, float, DutyStatus], ...] = ()

    @property
    def d(self) -> str:
        return " ".join(f"{cmd} {_fmt(x)} {_fmt(y)}" for cmd, x, y in self.vertices)

    @property
    def is_empty(self) -> bool:
        return not self.vertices


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def build_step_path(intervals: Iterable[Interval], projector: AxisProjector) -> StepPath:
    """
    Turn contiguous intervals into a step-function polyline.

    Every interval emits a line to its start at its own row, then across to
    its (clipped) end. A row change between neighbours therefore shows up as
    a vertical jump at the boundary hour.
    """
    vertices: List[Tuple[str, float, float]] = []
    regions: List[HoverRegion] = []
    dots: List[Tuple[float, float, DutyStatus]] = []
    right_edge = projector.hour_to_x(HOURS_PER_DAY)
    for i, interval in enumerate(intervals):
        x1 = projector.hour_to_x(min(interval.start_hour, HOURS_PER_DAY))
        x2 = projector.hour_to_x(interval.clipped_end_hour)
        y = projector.row_to_y(interval.row)
        vertices.append(("M" if i == 0 else "L", x1, y))
        vertices.append(("L", x2, y))
        # hover targets stay at least 1px wide without leaving the grid
        region_x = min(x1, right_edge - 1)
        regions.append(
            HoverRegion(
                x=region_x,
                y=projector.row_top(interval.row),
                width=max(x2 - region_x, 1),
                height=projector.row_height,
                status=interval.status,
                description=describe_interval(interval),
            )
        )
        dots.append((x1, y, interval.status))
    return StepPath(tuple(vertices), tuple(regions), tuple(dots))


def summary_line(accumulation: Accumulation) -> str:
    totals = accumulation.totals
    return (
        f"Driving: {totals[DutyStatus.DRIVING]:.1f}h • "
        f"On Duty: {totals[DutyStatus.ON_DUTY]:.1f}h"
    )


@dataclass
class DayChart:
    day: int
    accumulation: Accumulation
    path: StepPath
    projector: AxisProjector
    hover: HoverState = field(default_factory=HoverState)

    def enter_region(self, index: int) -> None:
        if not 0 <= index < len(self.path.regions):
            raise IndexError(f"No interval {index} on day {self.day}")
        self.hover.enter(self.path.regions[index].description)

    def leave(self) -> None:
        self.hover.leave()

    def as_dict(self) -> Dict:
        return {
            "day": self.day,
            "totals": {s.value: round(h, 4) for s, h in self.accumulation.totals.items()},
            "intervals": [
                {"status": iv.status.value, "start": iv.start_hour, "end": iv.end_hour}
                for iv in self.accumulation.intervals
            ],
            "d": self.path.d,
            "regions": [
                {
                    "x": r.x,
                    "y": r.y,
                    "width": r.width,
                    "height": r.height,
                    "status": r.status.value,
                    "description": r.description,
                }
                for r in self.path.regions
            ],
            "summary": self.hover.default_text,
        }


def build_day_chart(log: DayLog, projector: AxisProjector | None = None) -> DayChart:
    projector = projector or AxisProjector()
    acc = accumulate(log.segments)
    return DayChart(
        day=log.day,
        accumulation=acc,
        path=build_step_path(acc.intervals, projector),
        projector=projector,
        hover=HoverState(default_text=summary_line(acc)),
    )


def render_day_chart(chart: DayChart) -> str:
    """Render one day's duty-status grid as a standalone SVG document."""
    p = chart.projector
    totals = chart.accumulation.totals
    parts: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {_fmt(p.total_width)} {_fmt(p.total_height)}" '
        f'class="eld-svg" data-day="{chart.day}" data-summary="{escape(chart.hover.default_text)}" '
        f'onmouseleave="{RESET_HOVER_JS}">',
        f'<text x="{_fmt(p.left)}" y="{_fmt(p.top - 12)}" class="eld-hover-info">{escape(chart.hover.text)}</text>',
    ]

    for row, status in enumerate(STATUS_ROWS):
        label_y = _fmt(p.row_to_y(row) + 4)
        fill = "rgba(255,255,255,0.02)" if row % 2 == 0 else "rgba(255,255,255,0.04)"
        parts.append(
            f'<rect x="{_fmt(p.left)}" y="{_fmt(p.row_top(row))}" width="{_fmt(p.chart_width)}" '
            f'height="{_fmt(p.row_height)}" fill="{fill}"/>'
        )
        parts.append(
            f'<text x="{_fmt(p.left - 8)}" y="{label_y}" text-anchor="end" class="eld-row-label">{status.label}</text>'
        )
        parts.append(
            f'<text x="{_fmt(p.left + p.chart_width + 8)}" y="{label_y}" text-anchor="start" '
            f'class="eld-hour-total" fill="{status.color}">{totals[status]:.1f}h</text>'
        )

    for _, x, width in p.gridlines():
        parts.append(
            f'<line x1="{_fmt(x)}" y1="{_fmt(p.top)}" x2="{_fmt(x)}" y2="{_fmt(p.chart_bottom)}" '
            f'stroke="rgba(255,255,255,0.08)" stroke-width="{width}"/>'
        )
    for x, label in p.axis_labels():
        parts.append(
            f'<text x="{_fmt(x)}" y="{_fmt(p.chart_bottom + 16)}" text-anchor="middle" class="eld-hour-label">{label}</text>'
        )
    for y in p.row_dividers():
        parts.append(
            f'<line x1="{_fmt(p.left)}" y1="{_fmt(y)}" x2="{_fmt(p.left + p.chart_width)}" y2="{_fmt(y)}" '
            f'stroke="rgba(255,255,255,0.1)" stroke-width="1"/>'
        )

    for region in chart.path.regions:
        parts.append(
            f'<rect x="{_fmt(region.x)}" y="{_fmt(region.y)}" width="{_fmt(region.width)}" '
            f'height="{_fmt(region.height)}" fill="{region.status.color}" opacity="0.15" rx="2" '
            f'class="eld-segment-bg" data-hover="{escape(region.description)}" '
            f'onmouseenter="{SHOW_HOVER_JS}" onmouseleave="{RESET_HOVER_JS}">'
            f"<title>{escape(region.description)}</title></rect>"
        )

    if not chart.path.is_empty:
        parts.append(
            f'<path d="{chart.path.d}" fill="none" stroke="{LINE_COLOR}" stroke-width="2.5" '
            f'stroke-linejoin="round" stroke-linecap="round" class="eld-line"/>'
        )
    for x, y, status in chart.path.dots:
        parts.append(f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="3" fill="{status.color}" class="eld-dot"/>')

    parts.append("</svg>")
    return "\n".join(parts)

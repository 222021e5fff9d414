from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


def format_hour(hour: float) -> str:
    """
    Render a fractional hour since midnight as 12-hour clock time.

    13.5 -> "1:30 PM", 0 -> "12:00 AM". Hour 24 reads as midnight again.
    """
    hours = math.floor(hour)
    minutes = round((hour - hours) * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0
    hours %= 24
    period = "PM" if hours >= 12 else "AM"
    h12 = 12 if hours % 12 == 0 else hours % 12
    return f"{h12}:{minutes:02d} {period}"


def format_number(value: float) -> str:
    """Thousands separators, up to three decimals, no trailing zeros."""
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def hour_axis_label(hour: int) -> str:
    if hour in (0, 24):
        return "MN"
    if hour == 12:
        return "N"
    return str(hour - 12) if hour > 12 else str(hour)


def describe_interval(interval) -> str:
    return (
        f"{interval.status.label}: {interval.duration:.1f}h "
        f"({format_hour(interval.start_hour)} – {format_hour(interval.end_hour)})"
    )


def describe_marker(marker) -> str:
    parts = [marker.label]
    if marker.hour is not None:
        parts.append(f"Hour {format_number(marker.hour)}")
    if marker.mile:
        parts.append(f"Mile {format_number(marker.mile)}")
    return " • ".join(parts)


@dataclass
class HoverState:
    """
    Pointer hover state for one chart or map instance.

    Two states: idle (description is None) and hovering. Entering a region
    replaces whatever was shown; leaving a region or the whole surface goes
    back to idle, where `text` falls back to the default summary line.
    """

    default_text: str = ""
    description: Optional[str] = None

    @property
    def hovering(self) -> bool:
        return self.description is not None

    @property
    def text(self) -> str:
        return self.description if self.description is not None else self.default_text

    def enter(self, description: str) -> None:
        self.description = description

    def leave(self) -> None:
        self.description = None

from __future__ import annotations

from enum import Enum


# Rows on a standard driver's log, top to bottom:
# 0: Off Duty, 1: Sleeper Berth, 2: Driving, 3: On Duty (not driving)


class DutyStatus(str, Enum):
    OFF_DUTY = "off_duty"
    SLEEPER = "sleeper"
    DRIVING = "driving"
    ON_DUTY = "on_duty"

    @classmethod
    def coerce(cls, value: object) -> DutyStatus:
        """Unknown or missing statuses are logged as off duty."""
        try:
            return cls(value)
        except ValueError:
            return cls.OFF_DUTY

    @property
    def row(self) -> int:
        match self:
            case DutyStatus.OFF_DUTY:
                return 0
            case DutyStatus.SLEEPER:
                return 1
            case DutyStatus.DRIVING:
                return 2
            case DutyStatus.ON_DUTY:
                return 3

    @property
    def label(self) -> str:
        match self:
            case DutyStatus.OFF_DUTY:
                return "Off Duty"
            case DutyStatus.SLEEPER:
                return "Sleeper Berth"
            case DutyStatus.DRIVING:
                return "Driving"
            case DutyStatus.ON_DUTY:
                return "On Duty"

    @property
    def color(self) -> str:
        match self:
            case DutyStatus.OFF_DUTY:
                return "#64748b"
            case DutyStatus.SLEEPER:
                return "#818cf8"
            case DutyStatus.DRIVING:
                return "#06b6d4"
            case DutyStatus.ON_DUTY:
                return "#f59e0b"


STATUS_ROWS = tuple(sorted(DutyStatus, key=lambda s: s.row))


class StopKind(str, Enum):
    CURRENT = "current"
    PICKUP = "pickup"
    DROPOFF = "dropoff"
    FUEL = "fuel"
    REST = "rest"

    @classmethod
    def coerce(cls, value: object) -> StopKind:
        try:
            return cls(value)
        except ValueError:
            return cls.FUEL

    @property
    def is_waypoint(self) -> bool:
        return self in (StopKind.CURRENT, StopKind.PICKUP, StopKind.DROPOFF)

    @property
    def color(self) -> str:
        match self:
            case StopKind.CURRENT:
                return "#8b5cf6"
            case StopKind.PICKUP:
                return "#22c55e"
            case StopKind.DROPOFF:
                return "#ef4444"
            case StopKind.FUEL:
                return "#f59e0b"
            case StopKind.REST:
                return "#6366f1"

    @property
    def emoji(self) -> str:
        match self:
            case StopKind.CURRENT:
                return "🚛"
            case StopKind.PICKUP:
                return "📦"
            case StopKind.DROPOFF:
                return "🏁"
            case StopKind.FUEL:
                return "⛽"
            case StopKind.REST:
                return "🛏️"

    @property
    def map_label(self) -> str:
        """Default marker label on the route map."""
        match self:
            case StopKind.CURRENT:
                return "Current Location"
            case StopKind.PICKUP:
                return "Pickup"
            case StopKind.DROPOFF:
                return "Drop-off"
            case StopKind.FUEL:
                return "Truck Stop / Fuel"
            case StopKind.REST:
                return "Rest Stop / Motel"

    @property
    def timeline_label(self) -> str:
        """Default entry label on the stops timeline."""
        match self:
            case StopKind.CURRENT:
                return "Current Location"
            case StopKind.PICKUP:
                return "Pickup"
            case StopKind.DROPOFF:
                return "Drop-off"
            case StopKind.FUEL:
                return "Fuel Stop"
            case StopKind.REST:
                return "Rest Period"

    @property
    def z_index_offset(self) -> int:
        # pickup above dropoff above current; intermediate stops below all three
        match self:
            case StopKind.PICKUP:
                return 1000
            case StopKind.DROPOFF:
                return 900
            case StopKind.CURRENT:
                return 800
            case StopKind.FUEL | StopKind.REST:
                return 500


WAYPOINT_KINDS = (StopKind.CURRENT, StopKind.PICKUP, StopKind.DROPOFF)

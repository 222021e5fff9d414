import pytest

from tripviz.services.eld_chart_service import (
    AxisProjector,
    Interval,
    accumulate,
    build_day_chart,
    build_step_path,
    render_day_chart,
)
from tripviz.services.kinds import DutyStatus
from tripviz.services.trip_result import DayLog, DutySegment


def _segments(*pairs):
    return [DutySegment(status, hours) for status, hours in pairs]


def test_accumulate_scenario():
    acc = accumulate(_segments(("driving", 5), ("off_duty", 3), ("driving", 2)))
    assert acc.totals == {
        DutyStatus.OFF_DUTY: 3,
        DutyStatus.SLEEPER: 0,
        DutyStatus.DRIVING: 7,
        DutyStatus.ON_DUTY: 0,
    }
    assert [(iv.status, iv.start_hour, iv.end_hour) for iv in acc.intervals] == [
        (DutyStatus.DRIVING, 0, 5),
        (DutyStatus.OFF_DUTY, 5, 8),
        (DutyStatus.DRIVING, 8, 10),
    ]


@pytest.mark.parametrize(
    "pairs",
    [
        [],
        [("sleeper", 10)],
        [("on_duty", 0.5), ("driving", 8), ("off_duty", 0.5), ("driving", 3), ("sleeper", 12)],
        [("driving", 0), ("on_duty", 1.25), ("driving", 30)],
    ],
)
def test_accumulate_totals_and_contiguity(pairs):
    acc = accumulate(_segments(*pairs))
    assert acc.total_hours == pytest.approx(sum(h for _, h in pairs))
    assert set(acc.totals) == set(DutyStatus)
    if acc.intervals:
        assert acc.intervals[0].start_hour == 0
    for prev, nxt in zip(acc.intervals, acc.intervals[1:]):
        assert prev.end_hour == nxt.start_hour


def test_unknown_status_counts_as_off_duty():
    acc = accumulate(_segments(("yard_move", 2), ("driving", 1)))
    assert acc.totals[DutyStatus.OFF_DUTY] == 2
    assert acc.intervals[0].status is DutyStatus.OFF_DUTY
    assert acc.intervals[0].row == 0


@pytest.mark.parametrize("width", [900, 400, 1200.5])
def test_axis_projector_endpoints(width):
    p = AxisProjector(total_width=width)
    assert p.hour_to_x(0) == p.left
    assert p.hour_to_x(24) == pytest.approx(p.left + p.chart_width)


def test_axis_projector_rows_and_grid():
    p = AxisProjector()
    assert p.chart_width == 750
    assert p.total_height == 220
    assert [p.row_to_y(r) for r in range(4)] == [50, 90, 130, 170]
    grid = p.gridlines()
    assert len(grid) == 25
    assert grid[6] == (6, p.hour_to_x(6), 1.5)
    assert grid[7][2] == 0.5
    labels = [text for _, text in p.axis_labels()]
    assert labels == ["MN", "2", "4", "6", "8", "10", "N", "2", "4", "6", "8", "10", "MN"]
    assert p.row_dividers() == [30, 70, 110, 150, 190]


def test_step_path_empty():
    path = build_step_path([], AxisProjector())
    assert path.is_empty
    assert path.d == ""
    assert path.regions == ()


def test_step_path_single_segment_is_one_horizontal_stroke():
    path = build_step_path([Interval(DutyStatus.SLEEPER, 0, 10)], AxisProjector())
    assert path.vertices == (("M", 100, 90), ("L", 412.5, 90))


def test_step_path_scenario_jumps_at_boundaries():
    acc = accumulate(_segments(("driving", 5), ("off_duty", 3), ("driving", 2)))
    path = build_step_path(acc.intervals, AxisProjector())
    assert path.d == "M 100 130 L 256.25 130 L 256.25 50 L 350 50 L 350 130 L 412.5 130"
    assert [r.description for r in path.regions] == [
        "Driving: 5.0h (12:00 AM – 5:00 AM)",
        "Off Duty: 3.0h (5:00 AM – 8:00 AM)",
        "Driving: 2.0h (8:00 AM – 10:00 AM)",
    ]
    assert path.regions[1].y == 30
    assert path.regions[1].height == 40


def test_step_path_clips_past_midnight_but_keeps_totals():
    acc = accumulate(_segments(("on_duty", 20), ("driving", 10)))
    path = build_step_path(acc.intervals, AxisProjector())
    assert path.vertices[-1] == ("L", 850, 130)
    assert acc.totals[DutyStatus.DRIVING] == 10
    # zero-width regions still get a 1px hover target
    assert all(r.width >= 1 for r in path.regions)


def test_day_chart_summary_and_svg():
    chart = build_day_chart(DayLog(day=2, segments=tuple(_segments(("driving", 5), ("on_duty", 1.5)))))
    assert chart.hover.text == "Driving: 5.0h • On Duty: 1.5h"
    svg = render_day_chart(chart)
    assert svg.startswith("<svg")
    assert 'data-day="2"' in svg
    assert chart.path.d in svg
    assert svg.count('class="eld-dot"') == 2
    assert ">5.0h</text>" in svg
    assert "Sleeper Berth" in svg


def test_day_chart_without_segments_draws_no_line():
    chart = build_day_chart(DayLog(day=1))
    svg = render_day_chart(chart)
    assert 'class="eld-line"' not in svg
    assert chart.as_dict()["d"] == ""


def test_interval_starting_past_midnight_keeps_hover_region_on_grid():
    p = AxisProjector()
    acc = accumulate(_segments(("off_duty", 24), ("driving", 2)))
    late = build_step_path(acc.intervals, p).regions[1]
    assert late.x == p.hour_to_x(24) - 1
    assert late.x + late.width == p.hour_to_x(24)


def test_svg_regions_carry_tooltips_and_hover_handlers():
    chart = build_day_chart(DayLog(day=1, segments=tuple(_segments(("driving", 5), ("off_duty", 3)))))
    svg = render_day_chart(chart)
    for region in chart.path.regions:
        assert f"<title>{region.description}</title>" in svg
    assert svg.count('onmouseenter="') == 2
    assert 'class="eld-hover-info">Driving: 5.0h • On Duty: 0.0h</text>' in svg


def test_hovered_region_replaces_summary_line_until_leave():
    chart = build_day_chart(DayLog(day=1, segments=tuple(_segments(("driving", 5), ("off_duty", 3)))))
    chart.enter_region(1)
    assert 'class="eld-hover-info">Off Duty: 3.0h (5:00 AM – 8:00 AM)</text>' in render_day_chart(chart)

    chart.leave()
    assert 'class="eld-hover-info">Driving: 5.0h • On Duty: 0.0h</text>' in render_day_chart(chart)


@pytest.mark.parametrize("index", [-1, 2])
def test_enter_region_out_of_range(index):
    chart = build_day_chart(DayLog(day=1, segments=tuple(_segments(("driving", 5), ("off_duty", 3)))))
    with pytest.raises(IndexError):
        chart.enter_region(index)
    assert not chart.hover.hovering

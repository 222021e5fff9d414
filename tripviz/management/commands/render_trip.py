import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from tripviz.services.eld_chart_service import build_day_chart, render_day_chart
from tripviz.services.map_surface import RouteMapView
from tripviz.services.plan_client import PlanClient, PlanningSession
from tripviz.services.presentation_service import NO_DRIVE_TIME_MESSAGE
from tripviz.services.trip_result import parse_trip_result


class Command(BaseCommand):
    help = "Render a trip as map.html plus one eld_day_<n>.svg per day"

    def add_arguments(self, parser):
        parser.add_argument("--from-json", type=Path, help="Trip result JSON file (skips the planner)")
        parser.add_argument("--current", help="Current location")
        parser.add_argument("--pickup", help="Pickup location")
        parser.add_argument("--dropoff", help="Drop-off location")
        parser.add_argument("--cycle-used", type=float, default=0.0, help="Hours used in the 70h cycle")
        parser.add_argument("--out", type=Path, default=Path("."), help="Output directory")

    def handle(self, *args, **options):
        if options["from_json"]:
            try:
                trip = parse_trip_result(json.loads(options["from_json"].read_text()))
            except (OSError, ValueError) as exc:
                raise CommandError(f"Cannot read trip result: {exc}") from exc
        else:
            missing = [k for k in ("current", "pickup", "dropoff") if not options[k]]
            if missing:
                raise CommandError(f"Missing {', '.join('--' + k for k in missing)} (or pass --from-json)")
            if not 0 <= options["cycle_used"] <= 70:
                raise CommandError("--cycle-used must be between 0 and 70")
            session = PlanningSession()
            trip = session.submit(
                PlanClient(),
                {
                    "current_location": options["current"],
                    "pickup_location": options["pickup"],
                    "dropoff_location": options["dropoff"],
                    "cycle_used_hours": options["cycle_used"],
                },
            )
            if session.error:
                raise CommandError(session.error)

        out = options["out"]
        out.mkdir(parents=True, exist_ok=True)

        view = RouteMapView()
        view.show(trip.route)
        (out / "map.html").write_text(view.render(), encoding="utf-8")
        view.surface.destroy()
        self.stdout.write(f"Wrote {out / 'map.html'}")

        if not trip.has_drive_time:
            self.stdout.write(self.style.WARNING(NO_DRIVE_TIME_MESSAGE))
            return
        for log in trip.day_logs:
            chart = build_day_chart(log)
            path = out / f"eld_day_{log.day}.svg"
            path.write_text(render_day_chart(chart), encoding="utf-8")
            self.stdout.write(f"Wrote {path} ({chart.hover.default_text})")

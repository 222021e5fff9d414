from django.urls import path
from .views import HealthCheckView, VisualizeTripView, TripMapView, EldChartView, PlanTripView


urlpatterns = [
    path("health/", HealthCheckView.as_view(), name="health"),
    path("visualize/", VisualizeTripView.as_view(), name="visualize"),
    path("visualize/map/", TripMapView.as_view(), name="trip-map"),
    path("visualize/eld/<int:day>/", EldChartView.as_view(), name="eld-chart"),
    path("plan/", PlanTripView.as_view(), name="plan-trip"),
]

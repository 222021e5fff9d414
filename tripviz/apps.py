from django.apps import AppConfig


class TripvizConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tripviz"

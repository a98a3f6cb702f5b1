from django.apps import AppConfig


class ConsignmentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.consignments'

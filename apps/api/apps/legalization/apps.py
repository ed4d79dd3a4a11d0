"""Legalization app configuration."""
from django.apps import AppConfig


class LegalizationConfig(AppConfig):
    """Configuration for legalization app."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.legalization'
    verbose_name = 'Meter Legalization'

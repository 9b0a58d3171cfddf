"""
Django app configuration for the selections module.
"""

from django.apps import AppConfig # pyright: ignore[reportMissingModuleSource]


class SelectionsConfig(AppConfig):
    """Configuration class for the selections application."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'selections'
    verbose_name = 'Candidate Selections'

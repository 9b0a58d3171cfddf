"""
Django Admin Configuration for the Election Tracker
===================================================

Selections are READ-ONLY in the admin site:
- Rows are only created by the save endpoint (one batch per save)
- Editing a single row would silently corrupt the reconstructed save
- Deletion stays available for cleaning up test data
"""

from django.contrib import admin # pyright: ignore[reportMissingModuleSource, reportMissingImports]
from .models import Selection


@admin.register(Selection)
class SelectionAdmin(admin.ModelAdmin):
    """
    Admin interface for Selection model.

    Displays:
    - Who picked whom, from which list, at which rank
    - Insert timestamp (rows of one save share it)
    """

    list_display = ('user_id', 'selection_order', 'candidate_name', 'list_name', 'created_at')
    list_filter = ('list_name', 'user_id', 'created_at')
    search_fields = ('user_id', 'candidate_name')
    ordering = ('-created_at', 'selection_order')
    readonly_fields = ('id', 'user_id', 'candidate_name', 'list_name',
                      'selection_order', 'created_at')

    def has_add_permission(self, request):
        """Prevent manual row creation in admin."""
        return False

    def has_change_permission(self, request, obj=None):
        return False

"""
Main URL Router for the Election Tracker
========================================

Routes incoming HTTP requests to the Django admin site and the JSON API of
the selections app.
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Django admin panel
    path('admin/', admin.site.urls),

    # Selections API (admin picks, history, statistics, public viewer)
    path('api/', include('selections.urls')),
]

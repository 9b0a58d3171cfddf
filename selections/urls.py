"""
URL routing for the selections app
==================================

Maps URL patterns (mounted under /api/) to view functions for:
- Administrator sign-in state
- Admin picks, history, patterns and statistics
- The public viewer
"""

from django.urls import path
from . import views

app_name = 'selections'

urlpatterns = [
    # Sign-in
    path('auth/me/', views.me, name='me'),
    path('auth/login/', views.admin_login, name='login'),
    path('auth/logout/', views.admin_logout, name='logout'),

    # Rosters
    path('candidates/', views.candidates, name='candidates'),

    # Admin surface
    path('admin/selections/', views.admin_selections, name='admin_selections'),
    path('admin/history/', views.admin_history, name='admin_history'),
    path('admin/history/<str:group_id>/', views.admin_history_group, name='admin_history_group'),
    path('admin/patterns/', views.admin_patterns, name='admin_patterns'),
    path('admin/stats/', views.admin_stats, name='admin_stats'),
    path('admin/stats/global/', views.global_stats, name='global_stats'),

    # Public viewer
    path('viewer/', views.viewer_index, name='viewer_index'),
    path('viewer/<str:user_id>/', views.viewer_detail, name='viewer_detail'),
]

from django.urls import path

from . import views

app_name = 'jobs'

urlpatterns = [
    path('actions/recent/', views.recent_actions_view, name='recent_actions'),
    path('actions/<slug:action>/', views.action_view, name='action'),
    path('operations/<str:operation_id>/', views.snapshot_view, name='snapshot'),
    path('operations/<str:operation_id>/status/', views.status_view, name='status'),
    path('notifications/', views.notifications_view, name='notifications'),
]

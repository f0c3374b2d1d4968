from django.urls import path

from . import views

app_name = 'reports'

urlpatterns = [
    path('actions.xlsx', views.action_log_export, name='action_log_export'),
    path('shift-summary/', views.shift_summary_view, name='shift_summary'),
]

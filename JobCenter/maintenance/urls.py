# JobCenter/maintenance/urls.py
from django.urls import path
from . import views

app_name = 'maintenance'

urlpatterns = [
    path('tickets/', views.open_tickets_view, name='open_tickets'),
    path('tickets/<int:ticket_id>/close/', views.close_ticket_view, name='close_ticket'),
]

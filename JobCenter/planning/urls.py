from django.urls import path

from . import views

app_name = 'planning'

urlpatterns = [
    path('machines/', views.machines_view, name='machines'),
    path('shift/current/', views.current_shift_view, name='current_shift'),
    path('queue/', views.queue_view, name='queue'),
    path('sequence/', views.assign_sequence_view, name='assign_sequence'),
    path('sequence/remove/', views.remove_from_sequence_view, name='remove_from_sequence'),
]

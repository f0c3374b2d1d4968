# PATH: /JobCenter/users/urls.py
from django.urls import path
from .views import logout_view, session_view

app_name = 'users'

urlpatterns = [
    path('session/', session_view, name='session'),
    path('logout/', logout_view, name='logout'),
]

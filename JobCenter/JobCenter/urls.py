# PATH: /JobCenter/JobCenter/urls.py
from django.contrib import admin
from django.urls import path, include
from .views import health_view

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health_view, name='health'),

    # Operator tablet API: actions, snapshots and feeds
    path('api/jobs/', include('jobs.urls')),

    path('api/planning/', include('planning.urls')),
    path('api/maintenance/', include('maintenance.urls')),
    path('api/reports/', include('reports.urls')),

    # Session identity (namespaced include to enable 'users:...' reverse names)
    path('api/users/', include(('users.urls', 'users'), namespace='users')),
]

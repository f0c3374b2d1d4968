"""WSGI config for the Job Center project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'JobCenter.settings')

application = get_wsgi_application()

"""WSGI config for the schoolportal project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "schoolportal.settings")

application = get_wsgi_application()

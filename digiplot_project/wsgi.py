"""WSGI config for the DigiPlot dashboard."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'digiplot_project.settings')

application = get_wsgi_application()

"""
WSGI config for pgms project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'pgms.settings')

application = get_wsgi_application()

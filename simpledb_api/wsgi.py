"""
WSGI config for the SimpleDB HTTP API.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'simpledb_api.settings')

application = get_wsgi_application()

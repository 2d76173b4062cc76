"""
Django settings for the SimpleDB HTTP API.

Stores are in memory only, so no database is configured.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('SIMPLEDB_SECRET_KEY', 'simpledb-insecure-development-key')

DEBUG = os.environ.get('SIMPLEDB_DEBUG', '').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = os.environ.get('SIMPLEDB_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'api',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'simpledb_api.urls'

WSGI_APPLICATION = 'simpledb_api.wsgi.application'

DATABASES = {}

USE_TZ = True

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'DEFAULT_PARSER_CLASSES': ['rest_framework.parsers.JSONParser'],
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [],
    'UNAUTHENTICATED_USER': None,
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {'class': 'logging.StreamHandler'},
    },
    'loggers': {
        'simpledb': {
            'handlers': ['console'],
            'level': os.environ.get('SIMPLEDB_LOG_LEVEL', 'WARNING').upper(),
        },
    },
}

"""
Django settings for the fsa_service project.

Every deployment-specific value is read from the environment.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'insecure-development-key')

DEBUG = os.environ.get('DJANGO_DEBUG', 'false').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')
    if host.strip()
]

INSTALLED_APPS = [
    'minimiser',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'fsa_service.urls'

WSGI_APPLICATION = 'fsa_service.wsgi.application'

# No models; the test runner still expects a default database
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True

# Largest NFA, in states, accepted at the HTTP boundary
MINIMISER_MAX_STATES = int(os.environ.get('MINIMISER_MAX_STATES', '12'))

# Most DFA states subset construction may build, and largest DFA accepted for minimisation
MINIMISER_MAX_DFA_STATES = int(os.environ.get('MINIMISER_MAX_DFA_STATES', '256'))

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'minimiser': {
            'handlers': ['console'],
            'level': os.environ.get('MINIMISER_LOG_LEVEL', 'INFO').upper(),
            'propagate': False,
        },
    },
}

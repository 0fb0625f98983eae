"""
Django settings for the broodstock sales dashboard API.

Values come from the environment; a local .env file is loaded first.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR.parent / '.env')


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-secret-key-change-in-production')
DEBUG = env_bool('DJANGO_DEBUG', True)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get('ALLOWED_HOSTS', '*').split(',') if h.strip()]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.staticfiles',
    'rest_framework',
    'corsheaders',
    'broodstock.core',
    'broodstock.customers',
    'broodstock.orders',
    'broodstock.batches',
    'broodstock.dashboard',
]

MIDDLEWARE = [
    'broodstock.core.middleware.RequestLoggingMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'broodstock.config.urls'
WSGI_APPLICATION = 'broodstock.config.wsgi.application'

# No models are defined; the database only backs Django's own bookkeeping.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR.parent / 'db.sqlite3',
    }
}
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR.parent / 'staticfiles'

# Demo auth is handled inside the views, so DRF runs without user lookups.
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.AllowAny'],
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'UNAUTHENTICATED_USER': None,
    'EXCEPTION_HANDLER': 'broodstock.core.exceptions.envelope_exception_handler',
}

# Application
APP_VERSION = os.environ.get('APP_VERSION', '1.0.0')
APP_ENV = os.environ.get('APP_ENV', 'development')
DEFAULT_PAGE_SIZE = env_int('DEFAULT_PAGE_SIZE', 10)
MAX_PAGE_SIZE = env_int('MAX_PAGE_SIZE', 100)

# Connection string used by the setup_demo_db command
DEMO_DATABASE_URL = os.environ.get('DATABASE_URL', '')
DEMO_SQL_DIR = BASE_DIR / 'sql'

# Comma separated list, or '*' for any origin
_cors = os.environ.get('CORS_ORIGIN', '').strip()
CORS_ALLOW_ALL_ORIGINS = _cors == '*'
if not _cors:
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000', 'http://localhost:3001', 'http://localhost:3002']
elif not CORS_ALLOW_ALL_ORIGINS:
    CORS_ALLOWED_ORIGINS = [o.strip() for o in _cors.split(',') if o.strip()]

# Client data layer
API_URL = os.environ.get('API_URL', 'http://localhost:8000')
API_PATH = os.environ.get('API_PATH', '/api/v1')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
        'broodstock': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}

"""
Django settings for the auction back-office gateway.

All business data lives in the external auction backend; the local database
only backs Django's own bookkeeping (auth/contenttypes) and the test runner.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-backoffice-dev-key')

DEBUG = os.getenv('DJANGO_DEBUG', 'false').lower() == 'true'

ALLOWED_HOSTS = [host.strip() for host in os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if host.strip()]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'backend.core',
    'backend.clients',
    'backend.artists',
    'backend.schools',
    'backend.galleries',
    'backend.items',
    'backend.auctions',
    'backend.consignments',
    'backend.invoices',
    'backend.banking',
    'backend.refunds',
    'backend.reimbursements',
    'backend.logistics',
    'backend.payments',
    'backend.brands',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'backend.config.urls'

WSGI_APPLICATION = 'backend.config.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('SQLITE_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

# Cache: Redis when configured, otherwise process-local memory
REDIS_URL = os.getenv('REDIS_URL', '')
if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            },
            'KEY_PREFIX': 'backoffice',
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'backoffice-default',
        }
    }

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'backend.core.authentication.BackendTokenAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_RENDERER_CLASSES': (
        'rest_framework.renderers.JSONRenderer',
    ),
    'DEFAULT_PARSER_CLASSES': (
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.MultiPartParser',
        'rest_framework.parsers.FormParser',
    ),
    'EXCEPTION_HANDLER': 'backend.core.exceptions.backoffice_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

LANGUAGE_CODE = 'en-gb'
TIME_ZONE = 'Europe/London'
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Upstream auction backend
BACKEND_API_URL = os.getenv('BACKEND_API_URL', 'http://localhost:3001').rstrip('/')
BACKEND_API_TIMEOUT = int(os.getenv('BACKEND_API_TIMEOUT', '30'))
# Token used by management commands (no incoming request to borrow one from)
BACKEND_API_TOKEN = os.getenv('BACKEND_API_TOKEN', '')

# Public site used for fallback payment pages
PUBLIC_BASE_URL = os.getenv('PUBLIC_BASE_URL', 'http://localhost:3000').rstrip('/')

# Brand applied to brand-scoped listings for non super admins
DEFAULT_BRAND_CODE = os.getenv('DEFAULT_BRAND_CODE', 'MSABER')

# Duplicate image detection
DUPLICATE_IMAGE_THRESHOLD = float(os.getenv('DUPLICATE_IMAGE_THRESHOLD', '0.1'))
DUPLICATE_IMAGE_MAX_DIMENSION = int(os.getenv('DUPLICATE_IMAGE_MAX_DIMENSION', '512'))
DUPLICATE_IMAGE_CONCURRENCY = int(os.getenv('DUPLICATE_IMAGE_CONCURRENCY', '3'))
DUPLICATE_IMAGE_MAX_BYTES = int(os.getenv('DUPLICATE_IMAGE_MAX_BYTES', str(20 * 1024 * 1024)))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

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
    'loggers': {
        'backend': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
    },
}

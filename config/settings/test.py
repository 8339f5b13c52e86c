"""
StockLedger — Test Settings

Used by pytest (see pyproject.toml). SQLite unless DATABASE_URL points
elsewhere; set it to a PostgreSQL URL to run the row-lock race tests.

@file config/settings/test.py
"""

from .base import *  # noqa: F401, F403

DEBUG = False

DATABASES = {
    'default': env.db('DATABASE_URL', default=f'sqlite:///{BASE_DIR / "test.sqlite3"}'),  # noqa: F405
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

LOGGING['loggers']['stockledger']['level'] = 'WARNING'  # noqa: F405

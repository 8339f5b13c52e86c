"""
StockLedger — Celery Application

Reads CELERY_* settings from Django; the nightly reconciliation entry is
CELERY_BEAT_SCHEDULE in settings and is synced into django-celery-beat's
tables by the database scheduler.

@file config/celery.py
"""

import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('stockledger')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

"""
Celery configuration for the messenger.

Celery runs the background jobs of the identity store, currently the
periodic friendship symmetry audit (authentication.tasks). The schedule is
CELERY_BEAT_SCHEDULE in settings.

Usage:
    celery -A config worker -l info
    celery -A config beat -l info

https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("minimessenger")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery looks for a tasks.py module in each installed app
app.autodiscover_tasks()

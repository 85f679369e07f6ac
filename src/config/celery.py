"""
Celery application for the products broker listener (variant A).

``DJANGO_SETTINGS_MODULE`` is set before the app is instantiated so the
broker failover list and serializers come from Django settings
(``CELERY_`` prefix).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("products")

# Reads Django settings with the CELERY_ prefix
app.config_from_object("django.conf:settings", namespace="CELERY")

# Discovers tasks.py in every installed app
app.autodiscover_tasks()

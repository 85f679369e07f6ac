"""Settings for the pytest run.

Provides the required environment variables before ``config.settings``
validates them, then switches Celery to eager mode on an in-memory broker.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("PORT", "3001")
os.environ.setdefault("PRODUCTS_BROKER_SERVERS", "memory://localhost/")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")

from config.settings import *  # noqa: E402,F401,F403

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_RESULT_BACKEND = None

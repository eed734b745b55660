"""WSGI entry point.

Opens the MongoDB connection at startup so the readiness state reflects
the real topology before the first request arrives, and closes it when
the worker process exits.
"""

import atexit
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()

from modules.core.database import close_connection, get_connection  # noqa: E402

get_connection().connect()
atexit.register(close_connection)

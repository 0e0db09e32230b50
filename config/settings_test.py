import os

os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret-key")

from .settings import *  # noqa: E402,F401,F403


DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Engine tests drive drains explicitly
SYNC_AUTO_DRAIN = False
SYNC_ASSUME_ONLINE = True
SYNC_API_URL = "http://central.test/api"
SYNC_API_TOKEN = "test-token"

RATELIMIT_ENABLE = False

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"], "level": "DEBUG"},
}

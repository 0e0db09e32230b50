from .settings import *
import os
import dj_database_url


DEBUG = False

SECRET_KEY = os.environ["DJANGO_SECRET_KEY"]

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

# ---------------------------------------------------------------
# DATABASE
# ---------------------------------------------------------------

DATABASES = {
    "default": dj_database_url.config(
        env="DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'station.sqlite3'}",
        conn_max_age=600,  # persistent connections
        conn_health_checks=True,  # auto-reconnect on stale connections
    ),
}

# ---------------------------------------------------------------
# STATIC FILES - WhiteNoise
# ---------------------------------------------------------------
MIDDLEWARE = [
    MIDDLEWARE[0],
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    *MIDDLEWARE[2:],
]

STATIC_ROOT = BASE_DIR / "staticfiles"
STORAGES = {
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

# ---------------------------------------------------------------
# CORS
# ---------------------------------------------------------------

CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
CORS_ALLOW_CREDENTIALS = True

# ---------------------------------------------------------------
# CENTRAL API
# ---------------------------------------------------------------

SYNC_API_URL = os.environ["SYNC_API_URL"]
SYNC_API_TOKEN = os.environ.get("SYNC_API_TOKEN", "")

# ---------------------------------------------------------------
# SECURITY HEADERS
# ---------------------------------------------------------------

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# ---------------------------------------------------------------
# LOGGING
# ---------------------------------------------------------------

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "sync_file": {
            "level": "INFO",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / "sync.log",
            "maxBytes": 1024 * 1024 * 5,  # 5 MB
            "backupCount": 3,
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "WARNING"),
            "propagate": False,
        },
        "django.db.backends": {
            "level": "WARNING",  # suppress query logs in prod
            "handlers": ["console"],
            "propagate": False,
        },
        "apps.sync": {
            "handlers": ["console", "sync_file"],
            "level": "INFO",
            "propagate": False,
        },
    },
}

# ---------------------------------------------------------------
# RATE LIMITING (django-ratelimit)
# Apply in views with @ratelimit(key='ip', rate='20/m')
# ---------------------------------------------------------------

RATELIMIT_USE_CACHE = "default"
RATELIMIT_ENABLE = True

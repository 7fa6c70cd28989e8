"""
HB - Django Settings (Infrastructure Only)
============================================
Django hosts the persistent pieces of the core (sync claims).
Business-day and alert logic never import Django.

HB_* engine tunables are read from the environment here and turned
into core.config.EngineSettings by load_engine_settings().
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("HB_SECRET_KEY", "hb-dev-key-replace-before-deployment")

DEBUG = os.environ.get("HB_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── HB Modules ────────────────────────────────────────
    "core.sync_store",
]

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("HB_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Engine tunables ───────────────────────────────────────────
HB_SUMMARY_TOLERANCE_SECONDS = float(os.environ.get("HB_SUMMARY_TOLERANCE_SECONDS", "30"))
HB_CLAIM_ABANDON_SECONDS = float(os.environ.get("HB_CLAIM_ABANDON_SECONDS", "600"))
HB_FETCH_TIMEOUT_SECONDS = float(os.environ.get("HB_FETCH_TIMEOUT_SECONDS", "120"))
HB_DEFAULT_TIMEZONE = os.environ.get("HB_DEFAULT_TIMEZONE", "UTC")

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "hb": {
            "handlers": ["console"],
            "level": os.environ.get("HB_LOG_LEVEL", "INFO"),
        },
    },
}

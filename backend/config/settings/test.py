"""
Test settings.

In-memory SQLite and local-memory cache so the suite runs without services.
"""

import tempfile

from .base import *  # noqa: F403

DEBUG = False
SECRET_KEY = "test-secret-key-not-for-production"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

MEDIA_ROOT = tempfile.mkdtemp(prefix="cpl-manager-media-")
MEDIA_PUBLIC_BASE_URL = "http://testserver/media"

USE_S3_STORAGE = False
GROUP_PROVISIONING_WEBHOOK_URL = "https://automation.example.com/webhook/grupos"
PROVISIONING_CALLBACK_SECRET = "whsec_test_provisioning"
CONTACT_WEBHOOK_URL = ""
DEVICE_LINK_API_KEY = "test-device-link-key"

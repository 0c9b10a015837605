"""
Base Django settings for CPL Manager.

Shared configuration for all environments.
"""

from pathlib import Path

from pydantic_settings import BaseSettings

from apps.core.logging import configure_logging


class Settings(BaseSettings):
    """Environment-based configuration using pydantic-settings."""

    SECRET_KEY: str = "django-insecure-change-me-in-production"
    DEBUG: bool = False
    ALLOWED_HOSTS: list[str] = []

    # Database
    DB_ENGINE: str = "django.db.backends.postgresql"
    DB_NAME: str = "cpl_manager"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: str = "5432"

    # Logging
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"

    # Sessions
    SESSION_TTL_SECONDS: int = 60 * 60 * 12

    # Group provisioning automation
    GROUP_PROVISIONING_WEBHOOK_URL: str = ""
    GROUP_PROVISIONING_TIMEOUT_SECONDS: float = 15.0
    GROUP_REFRESH_DELAY_SECONDS: float = 20.0
    PROVISIONING_CALLBACK_SECRET: str = ""

    # Contact intake
    CONTACT_WEBHOOK_URL: str = ""
    CONTACT_WEBHOOK_TIMEOUT_SECONDS: float = 10.0
    CONTACT_RATE_LIMIT_PER_HOUR: int = 10

    # Device linking
    DEVICE_LINK_QR_URL: str = "https://mywhinlite.p.rapidapi.com/getqr"
    DEVICE_LINK_API_HOST: str = "mywhinlite.p.rapidapi.com"
    DEVICE_LINK_API_KEY: str = ""

    # Blob storage
    USE_S3_STORAGE: bool = False
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_STORAGE_BUCKET_NAME: str = ""
    AWS_S3_REGION_NAME: str = "us-east-1"
    MEDIA_PUBLIC_BASE_URL: str = "http://localhost:8000/media"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = settings.SECRET_KEY

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = settings.DEBUG

ALLOWED_HOSTS = settings.ALLOWED_HOSTS

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "apps.core",
    "apps.organizations",
    "apps.accounts",
    "apps.grupos",
    "apps.cpls",
    "apps.contact",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "apps.core.middleware.RequestContextMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "apps.core.middleware.SessionAuthMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

AUTH_USER_MODEL = "accounts.User"

# Database
DATABASES = {
    "default": {
        "ENGINE": settings.DB_ENGINE,
        "NAME": settings.DB_NAME,
        "USER": settings.DB_USER,
        "PASSWORD": settings.DB_PASSWORD,
        "HOST": settings.DB_HOST,
        "PORT": settings.DB_PORT,
    }
}

# Rate limiting and session revocation share the database cache across workers
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.db.DatabaseCache",
        "LOCATION": "cache_table",
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# Internationalization
LANGUAGE_CODE = "es"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"

# Uploaded CPL media (local storage backend)
MEDIA_URL = "media/"
MEDIA_ROOT = BASE_DIR / "media"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Logging is configured by structlog, not Django's dictConfig
LOGGING_CONFIG = None
configure_logging(json_format=settings.LOG_JSON, log_level=settings.LOG_LEVEL)

# Application settings
SESSION_TTL_SECONDS = settings.SESSION_TTL_SECONDS

GROUP_PROVISIONING_WEBHOOK_URL = settings.GROUP_PROVISIONING_WEBHOOK_URL
GROUP_PROVISIONING_TIMEOUT_SECONDS = settings.GROUP_PROVISIONING_TIMEOUT_SECONDS
GROUP_REFRESH_DELAY_SECONDS = settings.GROUP_REFRESH_DELAY_SECONDS
PROVISIONING_CALLBACK_SECRET = settings.PROVISIONING_CALLBACK_SECRET

CONTACT_WEBHOOK_URL = settings.CONTACT_WEBHOOK_URL
CONTACT_WEBHOOK_TIMEOUT_SECONDS = settings.CONTACT_WEBHOOK_TIMEOUT_SECONDS
CONTACT_RATE_LIMIT_PER_HOUR = settings.CONTACT_RATE_LIMIT_PER_HOUR

DEVICE_LINK_QR_URL = settings.DEVICE_LINK_QR_URL
DEVICE_LINK_API_HOST = settings.DEVICE_LINK_API_HOST
DEVICE_LINK_API_KEY = settings.DEVICE_LINK_API_KEY

USE_S3_STORAGE = settings.USE_S3_STORAGE
AWS_ACCESS_KEY_ID = settings.AWS_ACCESS_KEY_ID
AWS_SECRET_ACCESS_KEY = settings.AWS_SECRET_ACCESS_KEY
AWS_STORAGE_BUCKET_NAME = settings.AWS_STORAGE_BUCKET_NAME
AWS_S3_REGION_NAME = settings.AWS_S3_REGION_NAME
MEDIA_PUBLIC_BASE_URL = settings.MEDIA_PUBLIC_BASE_URL

# digiplot_project/settings.py

import os
from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {'1', 'true', 'yes', 'on'}


# --- IMPORTANT ---
# Override SECRET_KEY and DEBUG through the environment outside development.
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-digiplot-dev-key-replace-me')
DEBUG = env_bool('DJANGO_DEBUG', True)

ALLOWED_HOSTS = [host for host in os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',') if host]

# --- Application definition ---
INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    # --- Your Apps ---
    'core.apps.CoreConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'digiplot_project.urls'

# --- Template Configuration ---
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [os.path.join(BASE_DIR, 'templates')],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.messages.context_processors.messages',
                'core.context_processors.session_user',
            ],
        },
    },
]

WSGI_APPLICATION = 'digiplot_project.wsgi.application'

# --- Database Configuration ---
# All persistence lives behind the DigiPlot API; nothing is stored locally.
DATABASES = {}

# Auth state (API token + user record) travels in a signed cookie.
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
SESSION_COOKIE_HTTPONLY = True
MESSAGE_STORAGE = 'django.contrib.messages.storage.cookie.CookieStorage'

# --- DigiPlot API ---
DIGIPLOT = {
    'API_BASE_URL': os.environ.get('DIGIPLOT_API_BASE_URL', 'http://localhost:5000').rstrip('/'),
    'API_TIMEOUT': float(os.environ.get('DIGIPLOT_API_TIMEOUT', '15')),
    'DEBUG_LOGGING': env_bool('DIGIPLOT_DEBUG_LOGGING', False),
    'PAGE_SIZE': int(os.environ.get('DIGIPLOT_PAGE_SIZE', '10')),
    'CURRENCY': 'KES',
}

# --- REST framework (JSON endpoints backed by the API session) ---
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': ['core.api.authentication.ApiSessionAuthentication'],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.IsAuthenticated'],
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'UNAUTHENTICATED_USER': None,
}

# --- Logging ---
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'core': {
            'handlers': ['console'],
            'level': 'DEBUG' if DIGIPLOT['DEBUG_LOGGING'] else 'INFO',
            'propagate': False,
        },
    },
}

# --- Password validation ---
# Passwords are validated by the forms and by the API.

# --- Internationalization ---
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Africa/Nairobi'
USE_I18N = True
USE_TZ = True

# --- Static files (CSS, JavaScript, Images) ---
STATIC_URL = 'static/'
STATICFILES_DIRS = [
    os.path.join(BASE_DIR, 'static'),
]

# --- Uploads ---
FILE_UPLOAD_MAX_MEMORY_SIZE = 5 * 1024 * 1024

LOGIN_URL = 'login'

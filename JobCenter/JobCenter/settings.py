# PATH: /JobCenter/JobCenter/settings.py
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# NOTE: In production, SECRET_KEY must come from environment for security.
SECRET_KEY = os.environ.get('SECRET_KEY', 'django-insecure-jobcenter-key')

# DEBUG defaults to True for dev; set DEBUG=0/false in production.
DEBUG = str(os.environ.get('DEBUG', '1')).lower() in {'1', 'true', 'yes'}

# Allow all in dev; in production set ALLOWED_HOSTS from env.
_env_allowed = os.environ.get('ALLOWED_HOSTS')
ALLOWED_HOSTS: list[str] = (
    [h for h in (_env_allowed.split() if _env_allowed else ['*']) if h]
)
# Tablets reach the app through a reverse proxy on the shop floor network
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_TRUSTED_ORIGINS: list[str] = []

# If DOMAIN is provided (e.g. jobcenter.plant.local), trust it for HTTPS.
_domain = os.environ.get('DOMAIN')
if _domain:
    _domain = _domain.replace('http://', '').replace('https://', '').strip('/')
    CSRF_TRUSTED_ORIGINS += [
        f"https://{_domain}",
        f"https://www.{_domain}",
    ]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'users',
    'planning',
    'jobs',
    'maintenance',
    'reports',
    'csp',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'csp.middleware.CSPMiddleware',
]

# Content Security Policy settings for django-csp >= 4.0
CONTENT_SECURITY_POLICY = {
    "DIRECTIVES": {
        "default-src": ["'self'"],
        "script-src": ["'self'", "'unsafe-inline'"],
        "style-src": ["'self'", "'unsafe-inline'"],
        "img-src":    ["'self'", "data:"],
        "connect-src": ["'self'"],
    }
}

ROOT_URLCONF = 'JobCenter.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    }
]

WSGI_APPLICATION = 'JobCenter.wsgi.application'

AUTH_USER_MODEL = 'users.CustomUser'

# Default DB is SQLite. Override with env vars for PostgreSQL.
_db_engine = os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3')
if _db_engine == 'django.db.backends.sqlite3':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.environ.get('DJANGO_DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        }
    }
else:
    # Generic RDBMS config (PostgreSQL/MySQL) from environment.
    DATABASES = {
        'default': {
            'ENGINE': _db_engine,
            'NAME': os.environ.get('DB_NAME', 'jobcenter'),
            'USER': os.environ.get('DB_USER', 'jobcenter'),
            'PASSWORD': os.environ.get('DB_PASSWORD', ''),
            'HOST': os.environ.get('DB_HOST', '127.0.0.1'),
            'PORT': os.environ.get('DB_PORT', '5432'),
            # Surface a dead database as a failed action instead of a hung tablet
            'OPTIONS': {'connect_timeout': int(os.environ.get('DB_CONNECT_TIMEOUT', '5'))},
        }
    }

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'Asia/Kolkata')
USE_I18N = True
USE_TZ = True

# STATIC_URL must be absolute to avoid broken links on nested URLs
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

SESSION_EXPIRE_AT_BROWSER_CLOSE = False
SESSION_COOKIE_AGE = 60 * 60 * 12  # one shift plus handover

LOGIN_URL = '/admin/login/'

# ---------------------------------------------------------------------------
# Job Center domain settings
# ---------------------------------------------------------------------------
JOB_CENTER = {
    'RECENT_ACTIONS_LIMIT': 10,
    'NOTIFICATION_FEED_LIMIT': 50,
    # Breakdown reported on a paused job would hide the working status
    'ALLOW_BREAKDOWN_WHILE_PAUSED': str(
        os.environ.get('ALLOW_BREAKDOWN_WHILE_PAUSED', '0')
    ).lower() in {'1', 'true', 'yes'},
    'SHIFTS': {
        'A': {'start': '06:00', 'end': '14:00', 'name': 'Morning'},
        'B': {'start': '14:00', 'end': '22:00', 'name': 'Afternoon'},
        'C': {'start': '22:00', 'end': '06:00', 'name': 'Night'},
    },
    'CHANGEOVER_MINUTES': 15,
    'DEFAULT_JOB_MINUTES': 50,
}

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

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
        'jobs': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'planning': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'maintenance': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'reports': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}


# In production, tighten CSP and send it enforced; in DEBUG use report-only.
if DEBUG:
    CONTENT_SECURITY_POLICY_REPORT_ONLY = CONTENT_SECURITY_POLICY
    CONTENT_SECURITY_POLICY = None

# --- Static files: enable WhiteNoise in production for robust static serving ---
if not DEBUG:
    # Insert WhiteNoise right after SecurityMiddleware
    idx = MIDDLEWARE.index('django.middleware.security.SecurityMiddleware')
    MIDDLEWARE.insert(idx + 1, 'whitenoise.middleware.WhiteNoiseMiddleware')
    STORAGES = {
        'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
        'staticfiles': {'BACKEND': 'whitenoise.storage.CompressedStaticFilesStorage'},
    }

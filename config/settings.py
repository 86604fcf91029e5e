import sys
from pathlib import Path
from decouple import config


# BASE DIRECTORY
# BASE_DIR points to the project root (where manage.py is)
BASE_DIR = Path(__file__).resolve().parent.parent

# True while running the test suite (manage.py test or pytest)
TESTING = 'test' in sys.argv or 'pytest' in sys.modules


# SECURITY SETTINGS

# SECURITY WARNING: keep the secret key used in production secret!
# Generate new key: python -c 'from django.core.management.utils import get_random_secret_key; print(get_random_secret_key())'
SECRET_KEY = config('SECRET_KEY', default='django-insecure-CHANGE-THIS-IN-PRODUCTION')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=True, cast=bool)

# Format: 'domain.com,www.domain.com,api.domain.com'
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,0.0.0.0,testserver').split(',')


# INSTALLED APPS

INSTALLED_APPS = [
    # Django Channels (must be before django.contrib.staticfiles)
    'daphne',  # ASGI server for WebSocket support

    # Django built-in apps
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party apps
    'rest_framework',  # Deals JSON API
    'corsheaders',  # CORS headers support
    'crispy_forms',  # Form rendering
    'crispy_bootstrap5',  # Bootstrap 5 template pack
    'channels',  # Live deal board
    'taggit',  # Tags on contacts

    # Our apps
    # IMPORTANT: accounts must be first (custom user model)
    'apps.accounts',  # Users, roles, signup, team
    'apps.core',  # Tenants, branding, entity labels, dashboard
    'apps.contacts',  # Contacts & companies
    'apps.pipeline',  # Pipelines & stages
    'apps.automations',  # Automation templates & stage-automation engine
    'apps.deals',  # Deals, kanban, transitions
    'apps.activities',  # Notes, calls, tasks
    'apps.customfields',  # Tenant-defined fields
    'apps.analytics',  # Reports & exports
]


# MIDDLEWARE

# Each request passes through these top to bottom, responses bottom to top
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',  # must be before CommonMiddleware
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]


# URL CONFIGURATION
ROOT_URLCONF = 'config.urls'


# TEMPLATES
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [
            BASE_DIR / 'templates',  # Global templates directory
        ],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'apps.core.context_processors.tenant_branding',  # Labels + colour CSS
            ],
        },
    },
]


# ASGI/WSGI APPLICATION
ASGI_APPLICATION = 'config.asgi.application'
WSGI_APPLICATION = 'config.wsgi.application'


# DATABASE

# PostgreSQL in every deployment
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': config('DB_NAME', default='pipelinecrm_db'),
        'USER': config('DB_USER', default='pipelinecrm_user'),
        'PASSWORD': config('DB_PASSWORD', default='pipelinecrm_pass'),
        'HOST': config('DB_HOST', default='db'),  # 'db' is Docker service name
        'PORT': config('DB_PORT', default='5432'),
        'CONN_MAX_AGE': 600,  # Keep connection open for 10 minutes
        'OPTIONS': {
            'connect_timeout': 10,
        }
    }
}

if TESTING:
    # Test runs never need a Postgres server
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'test.sqlite3',
        }
    }


# AUTHENTICATION

# IMPORTANT: This MUST be set before first migration!
AUTH_USER_MODEL = 'accounts.User'

LOGIN_URL = '/accounts/login/'
LOGIN_REDIRECT_URL = '/dashboard/'
LOGOUT_REDIRECT_URL = '/accounts/login/'

if TESTING:
    PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


# INTERNATIONALIZATION
LANGUAGE_CODE = 'en-us'
TIME_ZONE = config('TIME_ZONE', default='UTC')
USE_I18N = True
USE_TZ = True


# STATIC FILES (CSS, JavaScript, Images)
STATIC_URL = '/static/'
STATICFILES_DIRS = [
    BASE_DIR / 'static',
]
STATIC_ROOT = BASE_DIR / 'staticfiles'


# MEDIA FILES (User Uploads)
MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'


# CRISPY FORMS
CRISPY_ALLOWED_TEMPLATE_PACKS = 'bootstrap5'
CRISPY_TEMPLATE_PACK = 'bootstrap5'


# DJANGO REST FRAMEWORK (API)
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
        'rest_framework.authentication.BasicAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 25,
    'DATETIME_FORMAT': '%Y-%m-%d %H:%M:%S',
}


# CORS HEADERS
if DEBUG:
    CORS_ALLOW_ALL_ORIGINS = True
else:
    CORS_ALLOWED_ORIGINS = config('CORS_ALLOWED_ORIGINS', default='https://yourdomain.com').split(',')


# CHANNELS (WebSocket)

# Redis passes board events between server processes
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels_redis.core.RedisChannelLayer',
        'CONFIG': {
            'hosts': [config('REDIS_URL', default='redis://redis:6379/1')],
        },
    },
}

if TESTING:
    CHANNEL_LAYERS = {
        'default': {'BACKEND': 'channels.layers.InMemoryChannelLayer'},
    }


# CELERY (Background Tasks)
CELERY_BROKER_URL = config('REDIS_URL', default='redis://redis:6379/0')
CELERY_RESULT_BACKEND = config('REDIS_URL', default='redis://redis:6379/0')
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_TIME_LIMIT = 5 * 60
CELERY_TASK_SOFT_TIME_LIMIT = 4 * 60
CELERY_TASK_ALWAYS_EAGER = config('CELERY_TASK_ALWAYS_EAGER', default=TESTING, cast=bool)


# EMAIL CONFIGURATION

# console: prints emails (development)
# smtp: real SMTP server
# apps.automations.backends.ResendEmailBackend: Resend HTTP API
EMAIL_BACKEND = config(
    'EMAIL_BACKEND',
    default='django.core.mail.backends.console.EmailBackend'
)
EMAIL_HOST = config('EMAIL_HOST', default='smtp.gmail.com')
EMAIL_PORT = config('EMAIL_PORT', default=587, cast=int)
EMAIL_USE_TLS = config('EMAIL_USE_TLS', default=True, cast=bool)
EMAIL_HOST_USER = config('EMAIL_HOST_USER', default='')
EMAIL_HOST_PASSWORD = config('EMAIL_HOST_PASSWORD', default='')
DEFAULT_FROM_EMAIL = config('DEFAULT_FROM_EMAIL', default='onboarding@resend.dev')

RESEND_API_KEY = config('RESEND_API_KEY', default='')
RESEND_API_URL = config('RESEND_API_URL', default='https://api.resend.com')

if TESTING:
    EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'


# LOGGING

LOG_DIR = BASE_DIR / 'logs'
LOG_DIR.mkdir(exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,

    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },

    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_DIR / 'django.log',
            'maxBytes': 1024 * 1024 * 10,  # 10 MB
            'backupCount': 5,
            'formatter': 'verbose',
        },
    },

    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': config('LOG_LEVEL', default='INFO'),
            'propagate': True,
        },
        'apps': {
            'handlers': ['console', 'file'],
            'level': 'WARNING' if TESTING else config('LOG_LEVEL', default='DEBUG'),
            'propagate': False,
        },
    },
}


# CUSTOM SETTINGS

PAGINATION_SIZE = 25

# Session settings
SESSION_COOKIE_AGE = 86400  # 24 hours
SESSION_SAVE_EVERY_REQUEST = False

# Pipeline automation settings
# Run stage automations in a Celery worker instead of the request
PIPELINE_AUTOMATIONS_ASYNC = config('PIPELINE_AUTOMATIONS_ASYNC', default=False, cast=bool)
AUTOMATION_EMAIL_FOOTER = 'This is an automated message from your CRM system.'

# Default pipeline created for every new tenant: (name, probability, is_won, is_lost)
DEFAULT_PIPELINE_NAME = 'Sales Pipeline'
DEFAULT_PIPELINE_STAGES = [
    ('Lead', 10, False, False),
    ('Qualified', 25, False, False),
    ('Proposal', 50, False, False),
    ('Negotiation', 75, False, False),
    ('Closed Won', 100, True, False),
    ('Closed Lost', 0, False, True),
]


# SECURITY SETTINGS (Production)

if not DEBUG:
    SECURE_SSL_REDIRECT = True
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True
    SECURE_BROWSER_XSS_FILTER = True
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = 'DENY'
    SECURE_HSTS_SECONDS = 31536000  # 1 year
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = True


# DEFAULT AUTO FIELD
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# remittance_api/settings.py
"""
Django settings for the remittance backend.

Postgres in production (DB_ENGINE=postgresql), SQLite file otherwise.
"""

import os
from pathlib import Path
from datetime import timedelta
from corsheaders.defaults import default_headers

# Base dir
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
DEBUG = os.getenv('DEBUG', '1') == '1'

# Hosts
ALLOWED_HOSTS = os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost 127.0.0.1 testserver').split()

# Application definition
INSTALLED_APPS = [
    # Django core (ordre critique)
    'django.contrib.contenttypes',
    'django.contrib.auth',

    # Custom user (before admin)
    'accounts',

    # Django admin & session
    'django.contrib.admin',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'rest_framework',
    'drf_spectacular',
    'corsheaders',
    'django_filters',

    # Local apps
    'core',
    'rates',
    'pricing',
    'remittances',
    'cash',
    'resellers',
    'accounting',
    'disputes',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'remittance_api.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'remittance_api.wsgi.application'

# -----------------------
# DATABASE CONFIGURATION
# -----------------------
if os.getenv('DB_ENGINE', 'sqlite') == 'postgresql':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.getenv('DB_NAME', 'remittances_db'),
            'USER': os.getenv('DB_USER', 'remittances'),
            'PASSWORD': os.getenv('DB_PASSWORD', ''),
            'HOST': os.getenv('DB_HOST', '127.0.0.1'),
            'PORT': os.getenv('DB_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.getenv('DB_NAME', BASE_DIR / 'db.sqlite3'),
            # SQLite ignore SELECT ... FOR UPDATE : le verrou d'écriture est pris dès BEGIN
            'OPTIONS': {
                'transaction_mode': 'IMMEDIATE',
                'timeout': int(os.getenv('SQLITE_TIMEOUT', '20')),
            },
            # Base de test sur fichier, partagée entre threads
            'TEST': {
                'NAME': BASE_DIR / 'test_db.sqlite3',
            },
        }
    }

# Custom user
AUTH_USER_MODEL = "accounts.User"

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator', 'OPTIONS': {'min_length': 8}},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',},
]

# Internationalization
LANGUAGE_CODE = os.getenv('LANGUAGE_CODE', 'es')
TIME_ZONE = os.getenv('TIME_ZONE', 'America/Havana')
USE_I18N = True
USE_TZ = True

# Static
STATIC_URL = '/static/'
STATIC_ROOT = os.getenv('STATIC_ROOT', BASE_DIR / 'staticfiles')

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# REST Framework
REST_FRAMEWORK = {
    # Auth
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),

    # Filters
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.SearchFilter",
        "rest_framework.filters.OrderingFilter",
    ],

    # Public endpoints
    'DEFAULT_THROTTLE_RATES': {
        'public': os.getenv('PUBLIC_THROTTLE_RATE', '120/minute'),
    },

    # Errors
    'EXCEPTION_HANDLER': 'core.exceptions.ledger_exception_handler',

    # Schema
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}


# Simple JWT
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=int(os.getenv('JWT_ACCESS_HOURS', '12'))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=int(os.getenv('JWT_REFRESH_DAYS', '30'))),
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': os.getenv('JWT_SIGNING_KEY', SECRET_KEY),
    'AUTH_HEADER_TYPES': ('Bearer',),
}

# Password hashing
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.Argon2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
]

# drf-spectacular (Swagger/OpenAPI)
SPECTACULAR_SETTINGS = {
    'TITLE': 'Remittance Ledger API',
    'DESCRIPTION': 'Remittance lifecycle, courier cash and reseller commission ledgers',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}

# CORS
CORS_ALLOW_ALL_ORIGINS = os.getenv('CORS_ALLOW_ALL_ORIGINS', '1') == '1'
CORS_ALLOW_HEADERS = list(default_headers)

# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {'standard': {'format': '[%(asctime)s] %(levelname)s %(name)s: %(message)s'},},
    'handlers': {'console': {'class': 'logging.StreamHandler', 'formatter': 'standard'},},
    'root': {'handlers': ['console'], 'level': os.getenv('DJANGO_LOG_LEVEL', 'INFO')},
}

# -----------------------
# BUSINESS RULES
# -----------------------
# Defaults; rows in pricing.BusinessSetting override them at runtime.
REMITTANCE_PRICING = {
    'LOCAL_DISCOUNT_PER_UNIT': os.getenv('LOCAL_DISCOUNT_PER_UNIT', '15'),
    'HARD_CURRENCY_FEE_PERCENT': os.getenv('HARD_CURRENCY_FEE_PERCENT', '5'),
    'DEFAULT_RESELLER_RATE': os.getenv('DEFAULT_RESELLER_RATE', '2'),
    'MIN_AMOUNT': os.getenv('MIN_REMITTANCE_AMOUNT', '10'),
    'MAX_AMOUNT': os.getenv('MAX_REMITTANCE_AMOUNT', '10000'),
}

EXCHANGE_RATES = {
    # Static ratio to the USD rate, used only when no source has the pair
    'FALLBACK_MULTIPLIERS': {
        'EUR': '1.05',
        'MLC': '0.70',
    },
    # Plausible CUP-per-unit ranges; provider quotes outside are dropped
    'PLAUSIBLE_RANGES': {
        'USD': ('300', '600'),
        'EUR': ('300', '700'),
        'MLC': ('200', '500'),
    },
}

RATE_PROVIDERS = {
    'PRIMARY_URL': os.getenv('RATE_PRIMARY_URL', 'https://tasas.eltoque.com/v1/trmi'),
    'PRIMARY_TOKEN': os.getenv('RATE_PRIMARY_TOKEN', ''),
    'SECONDARY_URL': os.getenv('RATE_SECONDARY_URL', 'https://www.cibercuba.com/noticias/economia'),
    'TIMEOUT': int(os.getenv('RATE_PROVIDER_TIMEOUT', '15')),
}

# Security for prod (not active)
SECURE_SSL_REDIRECT = os.getenv('SECURE_SSL_REDIRECT', '0') == '1'
SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', '0') == '1'
CSRF_COOKIE_SECURE = os.getenv('CSRF_COOKIE_SECURE', '0') == '1'

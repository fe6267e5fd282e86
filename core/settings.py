from environs import Env
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

env = Env()
env.read_env(BASE_DIR / '.env')

APP_ENV = env.str('APP_ENV', 'local')

SECRET_KEY = env.str('APP_SECRET_KEY', 'change-me')

DEBUG = APP_ENV != 'production'

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['*'])

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'paygate',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'core.urls'

WSGI_APPLICATION = 'core.wsgi.application'

# Verification is stateless; nothing is persisted.
DATABASES = {}


LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = True


REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [],
    'UNAUTHENTICATED_USER': None,
}

PAYGATE_NETWORK = env.str('PAYGATE_NETWORK', 'avalanche-fuji')
PAYGATE_CHAIN_ID = env.int('PAYGATE_CHAIN_ID', 43113)
PAYGATE_RPC_URL = env.str(
    'PAYGATE_RPC_URL', 'https://api.avax-test.network/ext/bc/C/rpc')
PAYGATE_RPC_TIMEOUT_SECONDS = env.int('PAYGATE_RPC_TIMEOUT_SECONDS', 10)
PAYGATE_TOKEN_ADDRESS = env.str(
    'PAYGATE_TOKEN_ADDRESS', '0x81FeDE901c8415A412f3407f6cEDBCDDC89D888c')
PAYGATE_TOKEN_DECIMALS = env.int('PAYGATE_TOKEN_DECIMALS', 18)
PAYGATE_TOKEN_SYMBOL = env.str('PAYGATE_TOKEN_SYMBOL', 'Tokens')
PAYGATE_RECIPIENT_ADDRESS = env.str(
    'PAYGATE_RECIPIENT_ADDRESS', env.str('RECEIVER_ADDRESS', ''))
PAYGATE_EXPLORER_URL = env.str(
    'PAYGATE_EXPLORER_URL', 'https://testnet.snowtrace.io')
PAYGATE_MULTIPLE_TRANSFER_POLICY = env.str(
    'PAYGATE_MULTIPLE_TRANSFER_POLICY', 'first')
PAYGATE_RETRY_MAX_ATTEMPTS = env.int('PAYGATE_RETRY_MAX_ATTEMPTS', 10)
PAYGATE_RETRY_BASE_DELAY_MS = env.int('PAYGATE_RETRY_BASE_DELAY_MS', 1000)
PAYGATE_RETRY_MAX_DELAY_MS = env.int('PAYGATE_RETRY_MAX_DELAY_MS', 5000)

import os
from dotenv import load_dotenv

load_dotenv()

# Diretório base do projeto
basedir = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name, default='true'):
    return os.environ.get(name, default).lower() in ['true', '1', 'on']


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-change-in-production'

    # Database - Usar caminho absoluto
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'thankswall.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Rate limiting (memória do processo)
    RATELIMIT_ENABLED = _env_flag('RATELIMIT_ENABLED')
    RATELIMIT_SWEEP_INTERVAL_MS = 5 * 60 * 1000

    # Paginação
    FEED_DEFAULT_PAGE_SIZE = 20
    FEED_MAX_PAGE_SIZE = 50
    DIRECTORY_MAX_PAGE_SIZE = 100

    # Busca combinada (empresas + agradecimentos)
    SEARCH_MAX_WORKERS = int(os.environ.get('SEARCH_MAX_WORKERS', '2'))

    # Tokens
    API_TOKEN_EXPIRES_IN = 30 * 24 * 3600  # 30 dias
    UPLOAD_TOKEN_EXPIRES_IN = 10 * 60

    # Uploads
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'instance', 'uploads')

    # Admin emails
    ADMIN_EMAILS = [e.strip() for e in os.environ.get('ADMIN_EMAILS', '').split(',') if e.strip()]


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key-for-testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RATELIMIT_ENABLED = False
    SEARCH_MAX_WORKERS = 1
    ADMIN_EMAILS = ['admin@test.com']

"""Application configuration module.

Loads configuration from environment variables with sensible defaults
for development.
"""
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class.

    Reads configuration from environment variables. All sensitive values
    should be set via environment variables, never hardcoded.
    """

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.environ.get('DEBUG', 'false').lower() in ('true', '1', 'yes')

    # Database settings
    # Default to SQLite for local development, PostgreSQL for production
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///project_dashboard.db'
    )

    # Managed Postgres providers hand out postgres:// URLs
    if SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace(
            'postgres://', 'postgresql://', 1
        )

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Identity provider page that starts sign-in. The provider hands the
    # user back to /sign-in with a token signed with SIGN_IN_SECRET.
    SIGN_IN_URL = os.environ.get('SIGN_IN_URL', '')
    SIGN_IN_SECRET = os.environ.get('SIGN_IN_SECRET', '')
    SIGN_IN_TOKEN_MAX_AGE = int(os.environ.get('SIGN_IN_TOKEN_MAX_AGE', '300'))

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Application settings
    APP_NAME = 'Project Analytics Dashboard'
    EXPORT_FILENAME_BASE = os.environ.get('EXPORT_FILENAME_BASE', 'project_data')
    DEFAULT_PAGE_SIZE = 25

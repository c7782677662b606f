import os
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables from .env file
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
dotenv_path = os.path.join(BASE_DIR, '.env')

# Load the .env file from that specific path
load_dotenv(dotenv_path=dotenv_path)


class Config:
    """Base configuration class."""

    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-fallback-secret-key-change-in-prod'
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'clubhub.db')

    # Flask-SQLAlchemy settings. One pooled engine per process.
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 280,
        'pool_pre_ping': True,
        'pool_timeout': 10,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # SQLite waits this long on a locked database file
    SQLITE_BUSY_TIMEOUT_MS = int(os.getenv('SQLITE_BUSY_TIMEOUT_MS', 5000))

    # Applied to MySQL and PostgreSQL connections (0 disables it)
    DB_STATEMENT_TIMEOUT_MS = int(os.getenv('DB_STATEMENT_TIMEOUT_MS', 5000))

    # Token settings
    JWT_SECRET = os.getenv('JWT_SECRET') or SECRET_KEY
    JWT_ALGORITHM = 'HS256'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=8)

    # Flask-Login only reads the bearer header; never touch the session cookie
    SESSION_PROTECTION = None

    # Passwords are capped at 24 characters but may still exceed bcrypt's 72 bytes
    BCRYPT_LOG_ROUNDS = 10
    BCRYPT_HANDLE_LONG_PASSWORDS = True

    # When enabled, login answers "unknown email" like "wrong password"
    LOGIN_MASK_UNKNOWN_USER = os.getenv('LOGIN_MASK_UNKNOWN_USER', 'false').lower() in ['true', 'on', '1']

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    PORT = int(os.getenv('PORT', 3000))

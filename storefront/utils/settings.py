# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

PORT = int(os.getenv("PORT", 4000))
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

JWT_SECRET = os.getenv("JWT_SECRET", "dev_secret_change_me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_SECONDS = int(os.getenv("JWT_EXPIRES_SECONDS", 4 * 60 * 60))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))

DB_HOST = os.getenv("DB_HOST", "127.0.0.1")
DB_PORT = int(os.getenv("DB_PORT", 5432))
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "larivera")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))
# seconds a request waits for a free pooled connection before failing
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 30))

# explicit url wins over the DB_* parts
DATABASE_URL = os.getenv("DATABASE_URL")

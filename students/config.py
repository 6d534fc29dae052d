import os

from dotenv import load_dotenv

from students.errors import ConfigurationError

# .env holds shared defaults, .private.env the credentials kept out of git
load_dotenv()
load_dotenv(".private.env")


def _flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def build_mongo_uri():
    """Return MONGO_URI, or assemble one from the MONGODB_* parts."""
    uri = os.environ.get("MONGO_URI")
    if uri:
        return uri

    address = os.environ.get("MONGODB_ADDRESS")
    name = os.environ.get("MONGODB_NAME")
    if not address or not name:
        return None

    username = os.environ.get("MONGODB_USERNAME")
    password = os.environ.get("MONGODB_PASSWORD")
    credentials = f"{username}:{password}@" if username and password else ""
    return f"mongodb://{credentials}{address}/{name}?authMechanism=DEFAULT"


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY")
    JWT_EXPIRE = int(os.environ.get("JWT_EXPIRE", 24 * 60 * 60))
    TOKEN_COOKIE_NAME = "token"
    TOKEN_COOKIE_SECURE = os.environ.get("FLASK_ENV") == "production"

    MONGO_URI = build_mongo_uri()
    MONGO_TLS = _flag("MONGO_TLS")
    MONGO_TRANSACTIONS = _flag("MONGO_TRANSACTIONS", default=True)

    USERS_COLLECTION_NAME = os.environ.get("USERS_COLLECTION_NAME", "users")
    GROUPS_COLLECTION_NAME = os.environ.get("GROUPS_COLLECTION_NAME", "groups")
    QUEUES_COLLECTION_NAME = os.environ.get("QUEUES_COLLECTION_NAME", "queues")
    ARCHIVE_COLLECTION_NAME = os.environ.get("ARCHIVE_COLLECTION_NAME", "archive")

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", 64 * 1024 * 1024))
    FILES_UPLOAD_LIMIT = 10

    PORT = int(os.environ.get("PORT", 5000))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    REQUIRED = ("SECRET_KEY", "JWT_SECRET_KEY", "MONGO_URI")

    @classmethod
    def check(cls, config):
        missing = [key for key in cls.REQUIRED if not config.get(key)]
        if missing:
            raise ConfigurationError(f"{', '.join(missing)} is undefined")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret"
    MONGO_URI = "mongodb://localhost:27017/students_test"
    MONGO_TLS = False
    MONGO_TRANSACTIONS = False
    LOG_LEVEL = "WARNING"

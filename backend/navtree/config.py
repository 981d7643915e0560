import os
from dotenv import load_dotenv

load_dotenv()


def _csv(value):
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Appended to the built-in reserved route list for page slugs
    RESERVED_SLUGS_EXTRA = _csv(os.getenv("RESERVED_SLUGS_EXTRA"))

    DEFAULT_PER_PAGE = int(os.getenv("DEFAULT_PER_PAGE", 20))
    MAX_PER_PAGE = int(os.getenv("MAX_PER_PAGE", 100))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///navtree-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")
    # Cycle checks read the whole parent graph before writing; anything
    # weaker than SERIALIZABLE lets two reparents jointly form a cycle.
    SQLALCHEMY_ENGINE_OPTIONS = {
        "isolation_level": os.getenv("DB_ISOLATION_LEVEL", "SERIALIZABLE"),
        "pool_pre_ping": True,
    }


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}

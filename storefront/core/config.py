# storefront/core/config.py
# Application configuration read from environment variables.
# Loads .env from the project root, then environment variables; keyword overrides win.
# Backend selection (DB / storage / reviews / cache / queue) is fixed for the process lifetime.

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

from storefront.core.errors import ConfigurationError

project_root = Path(__file__).resolve().parent.parent.parent
env_path = project_root / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

DB_TYPES = ("sqlite", "mysql")
STORAGE_TYPES = ("local", "s3")
REVIEW_STORES = ("local", "dynamodb")
CACHE_TYPES = ("memory", "redis")
QUEUE_TYPES = ("sync", "sqs")

DEFAULT_SECRET_KEY = "change_this_secret_in_prod"


class Settings:
    """Application settings with validation."""

    def __init__(self, **overrides):
        # Relational store: sqlite (embedded file) | mysql (networked pool)
        self.DB_TYPE: str = os.getenv("DB_TYPE", "sqlite")
        self.SQLITE_PATH: str = os.getenv("SQLITE_PATH", str(project_root / "data" / "ecommerce.db"))
        self.DB_HOST: str = os.getenv("DB_HOST", "127.0.0.1")
        self.DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
        self.DB_USER: str = os.getenv("DB_USER", "root")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
        self.DB_NAME: str = os.getenv("DB_NAME", "ecommerce")
        self.DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))

        # Blob storage: local | s3
        self.STORAGE_TYPE: str = os.getenv("STORAGE_TYPE", "local")
        self.UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", str(project_root / "uploads"))
        self.UPLOAD_URL_PREFIX: str = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
        self.S3_BUCKET: str = os.getenv("S3_BUCKET", "")
        self.S3_REGION: str = os.getenv("S3_REGION", "ap-northeast-2")

        # Review store: local (relational table) | dynamodb
        self.REVIEW_STORE: str = os.getenv("REVIEW_STORE", "local")
        self.DYNAMODB_TABLE: str = os.getenv("DYNAMODB_TABLE", "Reviews")
        self.DYNAMODB_REGION: str = os.getenv("DYNAMODB_REGION", "ap-northeast-2")

        # Cache: memory | redis
        self.CACHE_TYPE: str = os.getenv("CACHE_TYPE", "memory")
        self.REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
        self.REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))

        # Order notifications: sync (disabled) | sqs
        self.QUEUE_TYPE: str = os.getenv("QUEUE_TYPE", "sync")
        self.SQS_QUEUE_URL: str = os.getenv("SQS_QUEUE_URL", "")
        self.SNS_TOPIC_ARN: str = os.getenv("SNS_TOPIC_ARN", "")

        # JWT secret, replace it in production!
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
        self.ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
        self.ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

        # Environment (development, staging, production)
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
        self.PORT: int = int(os.getenv("PORT", "5000"))

        for name, value in overrides.items():
            if not hasattr(self, name):
                raise ConfigurationError(f"Unknown setting: {name}")
            setattr(self, name, value)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in ("production", "prod")

    @property
    def mysql_url(self) -> str:
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    def __post_init_checks__(self) -> None:
        """Flags configuration that must not reach production."""
        if self.is_production:
            if self.SECRET_KEY == DEFAULT_SECRET_KEY:
                raise ValueError(
                    "SECRET_KEY is not changed in production! "
                    "Set a unique value in the SECRET_KEY environment variable"
                )
            if self.DB_TYPE == "mysql" and self.DB_HOST in ("127.0.0.1", "localhost"):
                raise ValueError("DB_HOST points at localhost in production")

    def validate(self) -> None:
        """Rejects unknown backend identifiers; warns on unsafe defaults outside production."""
        choices = (
            ("DB_TYPE", DB_TYPES),
            ("STORAGE_TYPE", STORAGE_TYPES),
            ("REVIEW_STORE", REVIEW_STORES),
            ("CACHE_TYPE", CACHE_TYPES),
            ("QUEUE_TYPE", QUEUE_TYPES),
        )
        for name, allowed in choices:
            value = getattr(self, name)
            if value not in allowed:
                raise ConfigurationError(
                    f"Unsupported {name}: {value!r} (expected one of {', '.join(allowed)})"
                )
        try:
            self.__post_init_checks__()
        except ValueError as e:
            if self.is_production:
                raise ConfigurationError(str(e)) from e
            warnings.warn(str(e))

    def summary(self) -> dict:
        return {
            "dbType": self.DB_TYPE,
            "storageType": self.STORAGE_TYPE,
            "reviewStore": self.REVIEW_STORE,
            "cacheType": self.CACHE_TYPE,
            "queueType": self.QUEUE_TYPE,
        }


def get_settings(**overrides) -> Settings:
    """Builds and validates settings; used once at process start."""
    settings = Settings(**overrides)
    settings.validate()
    return settings

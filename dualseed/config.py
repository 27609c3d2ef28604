"""
Store settings.

Both stores are configured from the environment (a local ``.env`` file is
loaded first, if present). Every value has a default matching the
docker-compose setup used for development:

    MONGO_HOSTNAME     localhost      POSTGRES_HOSTNAME  localhost
    MONGO_PORT         40000          POSTGRES_PORT      40001
    MONGO_USERNAME     mongo          POSTGRES_USERNAME  postgres
    MONGO_PASSWORD     mongo          POSTGRES_PASSWORD  postgres
    MONGO_DATABASE     mongo          POSTGRES_DATABASE  postgres
"""

import os
from typing import Mapping, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError


class MongoSettings(BaseModel):
    """Connection settings for the document store."""
    hostname: str = "localhost"
    port: int = Field(40000, gt=0, lt=65536)
    username: str = "mongo"
    password: str = "mongo"
    database: str = "mongo"

    @property
    def url(self) -> str:
        return (
            f"mongodb://{quote_plus(self.username)}:{quote_plus(self.password)}"
            f"@{self.hostname}:{self.port}/{self.database}?authSource=admin"
        )


class PostgresSettings(BaseModel):
    """Connection settings for the relational store."""
    hostname: str = "localhost"
    port: int = Field(40001, gt=0, lt=65536)
    username: str = "postgres"
    password: str = "postgres"
    database: str = "postgres"


class Settings(BaseModel):
    mongo: MongoSettings = Field(default_factory=MongoSettings)
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)


def _read_section(environ: Mapping[str, str], prefix: str) -> dict:
    values = {}
    for field in ("hostname", "port", "username", "password", "database"):
        value = environ.get(f"{prefix}_{field.upper()}")
        if value is not None:
            values[field] = value
    return values


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    dotenv: bool = True
) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ``
        dotenv: Whether to load a ``.env`` file into ``os.environ`` first

    Returns:
        Settings for both stores

    Raises:
        ConfigurationError: If a value cannot be parsed (e.g. a non-numeric port)
    """
    if dotenv:
        load_dotenv()
    if environ is None:
        environ = os.environ

    try:
        return Settings(
            mongo=MongoSettings(**_read_section(environ, "MONGO")),
            postgres=PostgresSettings(**_read_section(environ, "POSTGRES")),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid store settings: {e}") from e

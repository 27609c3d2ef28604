"""MongoDB side of the dual write."""

import logging
from decimal import Decimal
from typing import Iterable, Mapping

from bson.codec_options import CodecOptions, TypeEncoder, TypeRegistry
from bson.decimal128 import Decimal128
from pymongo import MongoClient

from ..config import MongoSettings

logger = logging.getLogger(__name__)


class DecimalEncoder(TypeEncoder):
    """Store ``decimal.Decimal`` values as BSON Decimal128."""
    python_type = Decimal

    def transform_python(self, value):
        return Decimal128(value)


CODEC_OPTIONS = CodecOptions(tz_aware=True, type_registry=TypeRegistry([DecimalEncoder()]))


class DocumentStore:
    """Thin wrapper around one MongoDB database."""

    def __init__(self, client, database: str):
        self.client = client
        self.db = client.get_database(database, codec_options=CODEC_OPTIONS)

    @classmethod
    def connect(cls, settings: MongoSettings, timeout_ms: int = 5000) -> "DocumentStore":
        """Connect and ping the server so a bad address fails here."""
        client = MongoClient(settings.url, serverSelectionTimeoutMS=timeout_ms)
        store = cls(client, settings.database)
        store.ping()
        logger.info(f"Connected to MongoDB at {settings.hostname}:{settings.port}")
        return store

    def ping(self) -> None:
        self.client.admin.command("ping")

    def insert_many(self, collection: str, documents: Iterable[Mapping]) -> int:
        """Insert ``documents`` unordered; returns the number inserted."""
        documents = [dict(document) for document in documents]
        if not documents:
            return 0
        result = self.db[collection].insert_many(documents, ordered=False)
        return len(result.inserted_ids)

    def count(self, collection: str) -> int:
        return self.db[collection].count_documents({})

    def close(self) -> None:
        self.client.close()

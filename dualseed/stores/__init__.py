"""Store wrappers for the two sides of the dual write."""

from .document import DocumentStore
from .relational import CREATE_TABLES, RelationalStore

__all__ = [
    "DocumentStore",
    "RelationalStore",
    "CREATE_TABLES",
]

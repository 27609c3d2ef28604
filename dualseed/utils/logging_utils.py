"""Progress logging for the seeding pipeline."""

import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging the same way for the CLI and scripts."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class EntityLogger:
    """
    Structured progress log keyed by entity kind, count and id.

    Components receive an instance instead of logging directly, so callers
    decide where records go (and tests can capture them). Every record
    carries ``kind``, ``count`` and ``entity_id`` as ``extra`` attributes.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("dualseed")

    def _log(self, level: int, message: str, kind: Optional[str] = None,
             count: Optional[int] = None, entity_id: Optional[str] = None) -> None:
        self.logger.log(
            level,
            message,
            extra={"kind": kind, "count": count, "entity_id": entity_id},
        )

    def entity_created(self, kind: str, entity_id: str, items: Optional[int] = None) -> None:
        if items is None:
            message = f"[make_{kind}] created _id {entity_id}"
        else:
            message = f"[make_{kind}] created _id {entity_id} with {items} items"
        self._log(logging.INFO, message, kind=kind, count=items, entity_id=entity_id)

    def bulk_started(self, kind: str, count: int) -> None:
        self._log(logging.INFO, f"[bulk_make] make_{kind} for {count} items",
                  kind=kind, count=count)

    def bulk_finished(self, kind: str, count: int) -> None:
        self._log(logging.INFO, f"[bulk_make] generated {count} {kind} records",
                  kind=kind, count=count)

    def chunk_written(self, kind: str, index: int, size: int) -> None:
        self._log(logging.DEBUG, f"[insert_{kind}] chunk {index} written ({size} records)",
                  kind=kind, count=size)

    def inserted(self, kind: str, count: int) -> None:
        self._log(logging.INFO, f"[insert_{kind}] finished with {count}",
                  kind=kind, count=count)

    def step(self, name: str) -> None:
        self._log(logging.INFO, f"[{name}] finished")

    def warning(self, message: str, kind: Optional[str] = None) -> None:
        self._log(logging.WARNING, message, kind=kind)

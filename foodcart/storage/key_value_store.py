import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from foodcart.database.connection import get_session
from foodcart.exceptions.foodcart_error import StorageError
from foodcart.models.storage.storage_entry import StorageEntry


class KeyValueStore:
    """Durable string key-value storage backed by the ``tb_storage`` table."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def get(self, key: str) -> Optional[str]:
        try:
            with get_session(self.engine) as session:
                entry = session.get(StorageEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as e:
            logging.error(f"STORAGE >>> Error reading key {key} -> {e}")
            raise StorageError(f"Could not read storage key {key}") from e

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        try:
            with get_session(self.engine) as session:
                entry = session.get(StorageEntry, key)
                if entry:
                    entry.value = value
                    entry.updated_at = now
                else:
                    entry = StorageEntry(key=key, value=value, updated_at=now)
                session.add(entry)
                session.commit()
        except SQLAlchemyError as e:
            logging.error(f"STORAGE >>> Error writing key {key} -> {e}")
            raise StorageError(f"Could not write storage key {key}") from e


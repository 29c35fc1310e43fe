import json
from typing import Any

from sqlalchemy.orm import sessionmaker

from signdesk.models.kv import KeyValueEntry
from signdesk.utils.timestamps import utc_now


class KeyValueStore:
    """JSON values under string keys, one committed write per call."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get(self, key: str) -> Any | None:
        with self._session_factory() as db:
            row = db.query(KeyValueEntry).filter_by(key=key).first()
            if row is None:
                return None
            return json.loads(row.value)

    def set(self, key: str, value: Any):
        with self._session_factory() as db:
            db.merge(KeyValueEntry(key=key, value=json.dumps(value), updated_at=utc_now()))
            db.commit()

    def delete(self, key: str):
        with self._session_factory() as db:
            db.query(KeyValueEntry).filter_by(key=key).delete()
            db.commit()

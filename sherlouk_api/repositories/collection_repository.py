"""CRUD helpers over one named array of the JSON document."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable
import copy
import json
import logging

from sherlouk_api.core.errors import NotFoundError, ValidationError
from sherlouk_api.core.utils import new_record_id, now_ms
from sherlouk_api.repositories.json_storage import COLLECTIONS, DocumentStore

logger = logging.getLogger(__name__)


class CollectionRepository:
    """
    Append/list/delete records of a single collection.

    ``id`` (and ``timestamp`` when ``timestamped``) are always assigned here;
    values supplied by callers for those keys are discarded.
    """

    def __init__(
        self,
        store: DocumentStore,
        name: str,
        *,
        timestamped: bool = False,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_record_id,
    ) -> None:
        if name not in COLLECTIONS:
            raise ValueError(f"Unknown collection '{name}'")
        self.store = store
        self.name = name
        self.timestamped = timestamped
        self._clock = clock
        self._id_factory = id_factory

    def _reserved(self) -> tuple[str, ...]:
        return ("id", "timestamp") if self.timestamped else ("id",)

    def _unique_id(self, records: list) -> str:
        taken = {r.get("id") for r in records if isinstance(r, dict)}
        record_id = self._id_factory()
        while record_id in taken:
            record_id = self._id_factory()
        return record_id

    def list(self) -> list[dict]:
        return self.store.read()[self.name]

    def get(self, record_id: str) -> dict:
        for record in self.list():
            if isinstance(record, dict) and record.get("id") == record_id:
                return record
        raise NotFoundError(f"{self.name} record '{record_id}' not found")

    def create(self, fields: Mapping) -> dict:
        if not isinstance(fields, Mapping):
            raise ValidationError("Record body must be a JSON object")
        try:
            json.dumps(fields, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise ValidationError("Record fields must be finite JSON values") from exc
        reserved = self._reserved()
        with self.store.transaction() as db:
            records = db[self.name]
            record: dict = {"id": self._unique_id(records)}
            if self.timestamped:
                record["timestamp"] = self._clock()
            record.update({k: v for k, v in fields.items() if k not in reserved})
            records.append(record)
        logger.info("Created %s record %s", self.name, record["id"])
        return copy.deepcopy(record)

    def delete_by_id(self, record_id: str) -> int:
        """Remove every record with ``record_id``; returns how many were removed."""
        with self.store.transaction() as db:
            records = db[self.name]
            kept = [r for r in records if not (isinstance(r, dict) and r.get("id") == record_id)]
            removed = len(records) - len(kept)
            records[:] = kept
        if removed:
            logger.info("Deleted %s record %s", self.name, record_id)
        return removed


def build_repositories(store: DocumentStore, *, clock: Callable[[], int] = now_ms) -> dict[str, CollectionRepository]:
    return {
        "users": CollectionRepository(store, "users"),
        "tables": CollectionRepository(store, "tables"),
        "audit": CollectionRepository(store, "audit", timestamped=True, clock=clock),
    }

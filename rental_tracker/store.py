"""
Record store.

The full record collection is read and written as one JSON blob held in a
single ``StorageSlot`` row.  Reading never fails: missing or corrupt data
yields an empty list.  Writing happens in one commit; if it fails the
session is rolled back so the previously stored blob stays in place.
"""

import json
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from .errors import StorageReadError, StorageWriteError
from .models import RentalRecord, StorageSlot

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, session, key: str = 'rentalRecords'):
        self.session = session
        self.key = key

    def load(self) -> List[RentalRecord]:
        """Return the stored collection, or an empty list if it can't be read."""
        try:
            slot = self.session.get(StorageSlot, self.key)
        except SQLAlchemyError:
            logger.exception("Error reading slot %r from storage", self.key)
            self.session.rollback()
            return []
        if slot is None:
            return []
        try:
            return decode_records(slot.value)
        except StorageReadError as exc:
            logger.warning("Ignoring stored records in slot %r: %s", self.key, exc)
            return []

    def save(self, records: List[RentalRecord]) -> None:
        """Replace the stored collection with ``records``."""
        payload = encode_records(records)
        try:
            slot = self.session.get(StorageSlot, self.key)
            if slot is None:
                self.session.add(StorageSlot(key=self.key, value=payload))
            else:
                slot.value = payload
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error saving records to slot %r", self.key, exc_info=True)
            raise StorageWriteError('Could not save records. Storage might be full or disabled.') from exc

    def clear(self) -> None:
        """Remove the slot entirely."""
        try:
            slot = self.session.get(StorageSlot, self.key)
            if slot is not None:
                self.session.delete(slot)
                self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageWriteError('Could not clear stored records.') from exc


def encode_records(records: List[RentalRecord]) -> str:
    return json.dumps([r.to_dict() for r in records])


def decode_records(blob: str) -> List[RentalRecord]:
    """
    Decode a stored blob.  Raises StorageReadError when the blob is not a
    JSON array.  Individual entries that are not objects or have no id are
    skipped; duplicate ids keep the first occurrence.
    """
    try:
        data = json.loads(blob) if blob else []
    except (TypeError, ValueError) as exc:
        raise StorageReadError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise StorageReadError(f"expected a list, got {type(data).__name__}")
    records = []
    seen = set()
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning("Skipping stored entry %d: not an object", index)
            continue
        try:
            record = RentalRecord.from_dict(item)
        except ValueError as exc:
            logger.warning("Skipping stored entry %d: %s", index, exc)
            continue
        if record.id in seen:
            logger.warning("Skipping stored entry %d: duplicate id %s", index, record.id)
            continue
        seen.add(record.id)
        records.append(record)
    return records

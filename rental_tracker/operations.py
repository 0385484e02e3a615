"""
Record operations: add, delete and toggle the returned flag.

Each operation loads the whole collection, changes it and saves it back.
There is no partial update; a single operator drives the app so no two
operations run at the same time.
"""

import logging
from datetime import date
from typing import Callable, List, Optional, Union

from .errors import RecordNotFoundError, ValidationError
from .models import RentalRecord, new_record_id, parse_date
from .store import RecordStore

logger = logging.getLogger(__name__)


class RecordOperations:
    def __init__(self, store: RecordStore, today: Optional[Callable[[], date]] = None):
        self.store = store
        self.today = today or date.today

    def list_records(self) -> List[RentalRecord]:
        return self.store.load()

    def add_record(self, renter: str, car_type: str, car_number: str,
                   due_date: Union[date, str, None], returned: bool = False) -> RentalRecord:
        """
        Validate and append a new record.  Text fields are trimmed; any of
        renter, car type, car number or due date left blank raises
        ValidationError and nothing is stored.  The entry date is today's
        date and the id is fresh for the current collection.
        """
        renter = (renter or '').strip()
        car_type = (car_type or '').strip()
        car_number = (car_number or '').strip()
        if isinstance(due_date, str):
            due_date = due_date.strip()

        missing = [name for name, value in (('renter', renter),
                                            ('car_type', car_type),
                                            ('car_number', car_number),
                                            ('due_date', due_date)) if not value]
        parsed_due = parse_date(due_date)
        if 'due_date' not in missing and parsed_due is None:
            missing.append('due_date')
        if missing:
            raise ValidationError(missing)

        records = self.store.load()
        existing_ids = {r.id for r in records}
        record_id = new_record_id()
        while record_id in existing_ids:
            record_id = new_record_id()

        record = RentalRecord(
            id=record_id,
            entry_date=self.today(),
            renter=renter,
            car_type=car_type,
            car_number=car_number,
            due_date=parsed_due,
            returned=bool(returned),
        )
        records.append(record)
        self.store.save(records)
        logger.info("Added record %s for %s (%s)", record.id, record.renter, record.car_number)
        return record

    def delete_record(self, record_id: str) -> bool:
        """Remove a record.  Returns False (and writes nothing) if it is absent."""
        records = self.store.load()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self.store.save(remaining)
        logger.info("Deleted record %s", record_id)
        return True

    def toggle_returned(self, record_id: str, returned: bool) -> RentalRecord:
        records = self.store.load()
        for record in records:
            if record.id == record_id:
                record.returned = bool(returned)
                self.store.save(records)
                return record
        raise RecordNotFoundError(record_id)

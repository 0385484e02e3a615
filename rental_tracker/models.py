"""Data model for the rental tracker.

``RentalRecord`` is the only entity.  Records are never stored one per row;
the whole collection is serialized to JSON and kept in a single
``StorageSlot`` row, mirroring a browser's local key-value storage.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from uuid import uuid4

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


class StorageSlot(db.Model):
    __tablename__ = 'storage_slot'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)

    def __repr__(self) -> str:
        return f"<StorageSlot {self.key}>"


# ---------------------------------------------------------------------------
# Date helpers.  Dates are kept as ``datetime.date`` everywhere and written
# as ISO strings (YYYY-MM-DD).

def parse_date(value) -> Optional[date]:
    """Return a date for ``value`` or None if it is empty or not a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        # Tolerate full timestamps by keeping only the day part
        return date.fromisoformat(value.strip().split('T')[0])
    except ValueError:
        return None


def date_to_str(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def new_record_id() -> str:
    return f"record-{uuid4().hex}"


@dataclass
class RentalRecord:
    id: str
    renter: str
    car_type: str
    car_number: str
    due_date: Optional[date]
    entry_date: Optional[date] = None
    returned: bool = False

    def to_dict(self) -> dict:
        """
        Serialize using the persisted key names.  Blank text fields and
        missing dates are left out rather than written empty.
        """
        data = {'id': self.id}
        for key, value in (('entryDate', date_to_str(self.entry_date)),
                           ('renter', self.renter),
                           ('carType', self.car_type),
                           ('carNumber', self.car_number),
                           ('dueDate', date_to_str(self.due_date))):
            if value:
                data[key] = value
        data['returned'] = self.returned
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'RentalRecord':
        """
        Build a record from a persisted object.  Missing keys fall back to
        empty values and unknown keys are ignored, so they are dropped on
        the next save.  Raises ValueError when the object has no id.
        """
        record_id = data.get('id')
        if not isinstance(record_id, str) or not record_id:
            raise ValueError('record has no id')
        return cls(
            id=record_id,
            entry_date=parse_date(data.get('entryDate')),
            renter=_text(data.get('renter')),
            car_type=_text(data.get('carType')),
            car_number=_text(data.get('carNumber')),
            due_date=parse_date(data.get('dueDate')),
            returned=data.get('returned') is True,
        )


def _text(value) -> str:
    if value is None:
        return ''
    return str(value)

"""CSV export of the rental records."""

from datetime import date
from typing import Iterable, List

from .errors import ExportRefusedError
from .models import RentalRecord
from .views import DEFAULT_DATE_FORMAT

CSV_HEADERS = ['EntryDate', 'Renter', 'CarNameType', 'CarNumber', 'DueDate', 'Returned']


def quote(value: str) -> str:
    """Wrap in double quotes, doubling any quotes inside."""
    return '"' + (value or '').replace('"', '""') + '"'


def records_to_csv(records: Iterable[RentalRecord], date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """
    Serialize records in stored order.  Text fields are always quoted,
    dates are written in the display format (blank when missing) and the
    returned flag as Yes/No.  Raises ExportRefusedError for an empty list.
    """
    records: List[RentalRecord] = list(records)
    if not records:
        raise ExportRefusedError('No records to export.')
    lines = [','.join(CSV_HEADERS)]
    for r in records:
        lines.append(','.join([
            r.entry_date.strftime(date_format) if r.entry_date else '',
            quote(r.renter),
            quote(r.car_type),
            quote(r.car_number),
            r.due_date.strftime(date_format) if r.due_date else '',
            'Yes' if r.returned else 'No',
        ]))
    return '\n'.join(lines)


def export_filename(today: date) -> str:
    return f"vehicle_rental_records_{today.isoformat()}.csv"

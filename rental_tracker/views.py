"""
Derived views over the record collection.

Everything here is a pure function of the collection and "today"; the index
page recomputes all of them from a fresh load after every change.  Dates are
``datetime.date`` values so comparisons are at day granularity.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, NamedTuple, Optional, Tuple

from .models import RentalRecord

NOT_AVAILABLE = 'N/A'
DEFAULT_DATE_FORMAT = '%d/%m/%Y'


class Summary(NamedTuple):
    total: int
    returned_count: int
    outstanding: int

    @property
    def text(self) -> str:
        return (f"Total Records: {self.total} | Returned: {self.returned_count} | "
                f"Outstanding: {self.outstanding}")


class ChartDataset(NamedTuple):
    labels: Tuple[str, str]
    values: Tuple[int, int]


@dataclass
class DueSoonItem:
    record: RentalRecord
    days_until_due: int
    urgent: bool
    label: str


@dataclass
class TableRow:
    record: RentalRecord
    cells: Tuple[str, ...]
    overdue: bool


def format_date(value: Optional[date], fmt: str = DEFAULT_DATE_FORMAT) -> str:
    return value.strftime(fmt) if value else NOT_AVAILABLE


def sorted_rows(records: Iterable[RentalRecord]) -> List[RentalRecord]:
    """Newest entry first.  Ties keep their stored order; undated entries go last."""
    records = list(records)
    dated = [r for r in records if r.entry_date is not None]
    undated = [r for r in records if r.entry_date is None]
    # sorted() is stable, and reverse=True keeps equal keys in original order
    return sorted(dated, key=lambda r: r.entry_date, reverse=True) + undated


def is_overdue(record: RentalRecord, today: date) -> bool:
    return (not record.returned
            and record.due_date is not None
            and record.due_date < today)


def summarize(records: Iterable[RentalRecord]) -> Summary:
    records = list(records)
    total = len(records)
    returned_count = sum(1 for r in records if r.returned)
    return Summary(total=total, returned_count=returned_count,
                   outstanding=total - returned_count)


def due_soon(records: Iterable[RentalRecord], today: date, window_days: int = 7,
             urgent_days: int = 2, date_format: str = DEFAULT_DATE_FORMAT) -> List[DueSoonItem]:
    """
    Records still out whose due date falls between today and ``window_days``
    from today, inclusive at both ends, soonest first.  An item is urgent
    when it is due within ``urgent_days``.
    """
    soon = today + timedelta(days=window_days)
    upcoming = [r for r in records
                if not r.returned and r.due_date is not None and today <= r.due_date <= soon]
    upcoming.sort(key=lambda r: r.due_date)
    items = []
    for r in upcoming:
        days = (r.due_date - today).days
        label = (f"{r.car_type} ({r.car_number}) rented by {r.renter} - "
                 f"Due: {format_date(r.due_date, date_format)}")
        items.append(DueSoonItem(record=r, days_until_due=days,
                                 urgent=days <= urgent_days, label=label))
    return items


def chart_dataset(records: Iterable[RentalRecord]) -> ChartDataset:
    summary = summarize(records)
    return ChartDataset(labels=('Returned', 'Outstanding'),
                        values=(summary.returned_count, summary.outstanding))


def display_fields(record: RentalRecord, date_format: str = DEFAULT_DATE_FORMAT) -> Tuple[str, ...]:
    """The textual cells shown for a record in the table."""
    return (
        format_date(record.entry_date, date_format),
        record.renter or NOT_AVAILABLE,
        record.car_type or NOT_AVAILABLE,
        record.car_number or NOT_AVAILABLE,
        format_date(record.due_date, date_format),
        'Yes' if record.returned else 'No',
    )


def matches(record: RentalRecord, query: str, date_format: str = DEFAULT_DATE_FORMAT) -> bool:
    """Case-insensitive substring match against any displayed field."""
    needle = (query or '').strip().lower()
    if not needle:
        return True
    return any(needle in cell.lower() for cell in display_fields(record, date_format))


def filter_rows(records: Iterable[RentalRecord], query: str,
                date_format: str = DEFAULT_DATE_FORMAT) -> List[RentalRecord]:
    return [r for r in records if matches(r, query, date_format)]


def build_rows(records: Iterable[RentalRecord], today: date, query: str = '',
               date_format: str = DEFAULT_DATE_FORMAT) -> List[TableRow]:
    """Sorted, filtered table rows ready for the template."""
    rows = []
    for r in filter_rows(sorted_rows(records), query, date_format):
        rows.append(TableRow(record=r, cells=display_fields(r, date_format),
                             overdue=is_overdue(r, today)))
    return rows

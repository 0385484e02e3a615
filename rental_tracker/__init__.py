"""Vehicle rental tracker.

A small Flask application that keeps a list of vehicle rental records in a
single slot of a local key-value table and shows them as a table, a
summary line, a "due soon" reminder list and a status chart.
"""

from .app import create_app
from .models import RentalRecord
from .operations import RecordOperations
from .store import RecordStore

__all__ = ['create_app', 'RentalRecord', 'RecordOperations', 'RecordStore']

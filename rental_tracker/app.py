"""A simple vehicle rental tracker.

This Flask application keeps a list of vehicle rental records: who rented
which car, when it is due back and whether it has been returned.  The whole
list is stored as a single JSON document in one slot of a small key-value
table, so the app behaves like a local notebook rather than a database of
rentals.

To run the app locally:

    # Install the package (Flask and Flask-SQLAlchemy)
    pip install -e .

    # Initialise the database
    python -m rental_tracker --init-db

    # Start the development server
    python -m rental_tracker

The app will be available at http://localhost:5000/.  Records are added with
the form at the top of the page; the table below can be searched, records
marked as returned or deleted, and the list exported to CSV.
"""

import argparse
import json
import logging
import threading
from datetime import date
from functools import wraps

from flask import (Blueprint, Flask, Response, current_app, flash, redirect,
                   render_template, request, url_for)

from . import config as default_config
from .chart import StatusChart
from .errors import (ExportRefusedError, RecordNotFoundError,
                     StorageWriteError, ValidationError)
from .export import export_filename, records_to_csv
from .models import db
from .operations import RecordOperations
from .store import RecordStore
from .views import build_rows, chart_dataset, due_soon, format_date, summarize

VALIDATION_MESSAGE = 'Please fill in Renter Name, Car Name/Type, Car Number, and Due Date.'
SAVE_FAILED_MESSAGE = 'Could not save records. Storage might be full or disabled.'
NOTHING_TO_EXPORT_MESSAGE = 'No records to export.'

bp = Blueprint('rentals', __name__)


def create_app(config=None, chart=None, today=None) -> Flask:
    """
    Build the Flask app.  ``config`` overrides the defaults from
    :mod:`rental_tracker.config`; ``chart`` is the chart controller the index
    page updates (a new :class:`StatusChart` if omitted); ``today`` is a
    callable returning the current date, used by tests to pin the clock.
    """
    app = Flask(__name__)
    app.config.from_mapping(default_config.DEFAULTS)
    if config:
        app.config.from_mapping(config)

    level = app.config['LOG_LEVEL']
    app.logger.setLevel(level)
    logging.getLogger('rental_tracker').setLevel(level)

    db.init_app(app)
    app.extensions['rental_tracker'] = {
        'chart': chart or StatusChart(),
        'today': today or date.today,
        'lock': threading.RLock(),
    }
    app.register_blueprint(bp)

    with app.app_context():
        db.create_all()
    return app


# ---------------------------------------------------------------------------
# Helpers

def _today() -> date:
    return current_app.extensions['rental_tracker']['today']()


def _chart() -> StatusChart:
    return current_app.extensions['rental_tracker']['chart']


def serialized(view):
    """Run the view while holding the app-wide store lock."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        with current_app.extensions['rental_tracker']['lock']:
            return view(*args, **kwargs)
    return wrapper


def _operations() -> RecordOperations:
    store = RecordStore(db.session, key=current_app.config['RECORDS_STORAGE_KEY'])
    return RecordOperations(store, today=current_app.extensions['rental_tracker']['today'])


def _render_index(form=None, status=200):
    """
    Recompute every view from a fresh load and render the page.  Nothing is
    cached between requests.
    """
    cfg = current_app.config
    today = _today()
    records = _operations().list_records()
    query = request.args.get('q', '')
    date_format = cfg['DATE_DISPLAY_FORMAT']
    chart_config = _chart().update(chart_dataset(records))
    return render_template(
        'index.html',
        rows=build_rows(records, today, query=query, date_format=date_format),
        has_records=bool(records),
        query=query,
        summary=summarize(records),
        due_soon=due_soon(records, today, window_days=cfg['DUE_SOON_DAYS'],
                          urgent_days=cfg['URGENT_DAYS'], date_format=date_format),
        due_soon_days=cfg['DUE_SOON_DAYS'],
        chart_config=json.dumps(chart_config),
        form=form or {},
        today=today,
    ), status


# ---------------------------------------------------------------------------
# Routes

@bp.route('/')
@serialized
def index():
    return _render_index()


@bp.route('/records', methods=['POST'])
@serialized
def add_record():
    form = {
        'renter': request.form.get('renter', ''),
        'car_type': request.form.get('car_type', ''),
        'car_number': request.form.get('car_number', ''),
        'due_date': request.form.get('due_date', ''),
        'returned': request.form.get('returned') == 'on',
    }
    try:
        _operations().add_record(**form)
    except ValidationError as exc:
        current_app.logger.info("Rejected new record: %s", exc)
        flash(VALIDATION_MESSAGE)
        # Keep what the operator typed so they can fix it
        return _render_index(form=form, status=400)
    except StorageWriteError:
        flash(SAVE_FAILED_MESSAGE)
    return redirect(url_for('rentals.index'))


@bp.route('/records/<record_id>/delete', methods=['POST'])
@serialized
def delete_record(record_id: str):
    try:
        _operations().delete_record(record_id)
    except StorageWriteError:
        flash(SAVE_FAILED_MESSAGE)
    return redirect(url_for('rentals.index', q=request.args.get('q') or None))


@bp.route('/records/<record_id>/returned', methods=['POST'])
@serialized
def toggle_returned(record_id: str):
    returned = request.form.get('returned') in ('on', 'true', '1')
    try:
        _operations().toggle_returned(record_id, returned)
    except RecordNotFoundError:
        # Most likely deleted in another tab; nothing to show the operator
        current_app.logger.warning("Record not found for toggling status: %s", record_id)
    except StorageWriteError:
        flash(SAVE_FAILED_MESSAGE)
    return redirect(url_for('rentals.index', q=request.args.get('q') or None))


@bp.route('/export.csv')
@serialized
def export_csv():
    records = _operations().list_records()
    try:
        content = records_to_csv(records, current_app.config['DATE_DISPLAY_FORMAT'])
    except ExportRefusedError:
        flash(NOTHING_TO_EXPORT_MESSAGE)
        return redirect(url_for('rentals.index'))
    filename = export_filename(_today())
    return Response(content, mimetype='text/csv',
                    headers={'Content-Disposition': f'attachment; filename={filename}'})


@bp.app_template_filter('display_date')
def display_date(value):
    return format_date(value, current_app.config['DATE_DISPLAY_FORMAT'])


def init_db(app: Flask) -> None:
    """Initialise the database tables."""
    with app.app_context():
        db.create_all()
    print("Database initialised.")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Vehicle rental tracker")
    parser.add_argument('--init-db', action='store_true', help='Initialise the database')
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=5000)
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args(argv)
    app = create_app()
    if args.init_db:
        init_db(app)
    else:
        app.run(host=args.host, port=args.port, debug=args.debug,
                # one request at a time; every route is a full read-modify-write
                threaded=False)

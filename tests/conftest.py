from datetime import date

import pytest

from rental_tracker import create_app
from rental_tracker.models import db
from rental_tracker.operations import RecordOperations
from rental_tracker.store import RecordStore

TODAY = date(2024, 1, 3)


@pytest.fixture
def app():
    app = create_app({'SQLALCHEMY_DATABASE_URI': 'sqlite://', 'TESTING': True},
                     today=lambda: TODAY)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return RecordStore(db.session, key=app.config['RECORDS_STORAGE_KEY'])


@pytest.fixture
def ops(store):
    return RecordOperations(store, today=lambda: TODAY)

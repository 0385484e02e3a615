import json
from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from rental_tracker.errors import StorageReadError, StorageWriteError
from rental_tracker.models import RentalRecord, StorageSlot, db, parse_date
from rental_tracker.operations import RecordOperations
from rental_tracker.store import decode_records


def _put_raw(value):
    db.session.add(StorageSlot(key='rentalRecords', value=value))
    db.session.commit()


def _record(record_id='record-1', **kwargs):
    fields = dict(renter='Ann', car_type='Sedan', car_number='AB-12',
                  due_date=date(2024, 1, 5), entry_date=date(2024, 1, 1))
    fields.update(kwargs)
    return RentalRecord(id=record_id, **fields)


class TestLoad:
    def test_missing_slot_is_empty(self, store):
        assert store.load() == []

    @pytest.mark.parametrize('blob', ['{not json', '{"id": "x"}', '42', 'null'])
    def test_corrupt_blob_is_empty(self, store, blob):
        _put_raw(blob)
        assert store.load() == []

    def test_tolerates_extra_and_missing_fields(self, store):
        _put_raw(json.dumps([
            {'id': 'a', 'renter': 'Ann', 'carType': 'Van', 'carNumber': 'X1',
             'dueDate': '2024-02-01', 'entryDate': '2024-01-01', 'returned': True,
             'colour': 'red'},
            {'id': 'b', 'renter': 'Bob'},
        ]))
        a, b = store.load()
        assert a.due_date == date(2024, 2, 1)
        assert a.returned is True
        assert b.car_type == ''
        assert b.due_date is None
        assert b.returned is False

    def test_skips_unusable_entries(self, store):
        _put_raw(json.dumps([
            'junk',
            {'renter': 'no id'},
            {'id': 'a', 'renter': 'Ann'},
            {'id': 'a', 'renter': 'Duplicate'},
        ]))
        records = store.load()
        assert [r.renter for r in records] == ['Ann']

    def test_bad_date_reads_as_none(self, store):
        _put_raw(json.dumps([{'id': 'a', 'dueDate': '2024-13-45'}]))
        assert store.load()[0].due_date is None


class TestSave:
    def test_save_then_load(self, store):
        records = [_record('record-1'), _record('record-2', returned=True)]
        store.save(records)
        assert store.load() == records

    def test_persisted_layout(self, store):
        store.save([_record()])
        slot = db.session.get(StorageSlot, 'rentalRecords')
        assert json.loads(slot.value) == [{
            'id': 'record-1',
            'entryDate': '2024-01-01',
            'renter': 'Ann',
            'carType': 'Sedan',
            'carNumber': 'AB-12',
            'dueDate': '2024-01-05',
            'returned': False,
        }]

    def test_save_replaces_whole_collection(self, store):
        store.save([_record('record-1'), _record('record-2')])
        store.save([_record('record-3')])
        assert [r.id for r in store.load()] == ['record-3']

    def test_failed_write_keeps_previous_state(self, store, monkeypatch):
        store.save([_record('record-1')])

        def fail():
            raise OperationalError('UPDATE', {}, Exception('database or disk is full'))

        monkeypatch.setattr(db.session(), 'commit', fail)
        with pytest.raises(StorageWriteError):
            store.save([_record('record-1'), _record('record-2')])
        monkeypatch.undo()
        assert [r.id for r in store.load()] == ['record-1']

    def test_clear(self, store):
        store.save([_record()])
        store.clear()
        assert store.load() == []
        assert db.session.get(StorageSlot, 'rentalRecords') is None


def test_decode_rejects_non_list():
    with pytest.raises(StorageReadError):
        decode_records('{"a": 1}')


class TestPartialRecords:
    def test_toggle_does_not_write_blank_fields(self, store):
        _put_raw(json.dumps([{'id': 'a', 'renter': 'Bob'}]))
        RecordOperations(store).toggle_returned('a', True)
        slot = db.session.get(StorageSlot, 'rentalRecords')
        assert json.loads(slot.value) == [{'id': 'a', 'renter': 'Bob', 'returned': True}]

    def test_delete_keeps_other_partial_records_as_stored(self, store):
        _put_raw(json.dumps([{'id': 'a', 'renter': 'Bob', 'dueDate': '2024-01-05'},
                             {'id': 'b', 'renter': 'Ann'}]))
        RecordOperations(store).delete_record('b')
        slot = db.session.get(StorageSlot, 'rentalRecords')
        assert json.loads(slot.value) == [
            {'id': 'a', 'renter': 'Bob', 'dueDate': '2024-01-05', 'returned': False}]

    @pytest.mark.parametrize('stored', ['false', 'true', 1, 'yes', None])
    def test_returned_must_be_a_real_bool(self, store, stored):
        _put_raw(json.dumps([{'id': 'a', 'returned': stored}]))
        assert store.load()[0].returned is False

    def test_returned_true(self, store):
        _put_raw(json.dumps([{'id': 'a', 'returned': True}]))
        assert store.load()[0].returned is True


class TestParseDate:
    def test_datetime_becomes_date(self):
        value = parse_date(datetime(2024, 1, 5, 23, 30))
        assert value == date(2024, 1, 5)
        assert type(value) is date

    def test_iso_timestamp_keeps_day(self):
        assert parse_date('2024-01-05T10:00:00Z') == date(2024, 1, 5)

    @pytest.mark.parametrize('value', ['', '   ', 'soon', 20240105, None])
    def test_unusable_values(self, value):
        assert parse_date(value) is None

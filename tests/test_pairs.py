import pytest
from django.db import DatabaseError

from registrations.exceptions import StoreReadError
from registrations.pairs import PairIndex, pair_key


def test_pair_key_is_order_independent():
    assert pair_key(713, 911) == "713-911"
    assert pair_key(911, 713) == "713-911"


def test_pair_key_accepts_decimal_strings():
    assert pair_key("100019", "100003") == "100003-100019"


def test_insert_and_contains():
    index = PairIndex()
    assert not index.contains("713-911")
    index.insert("713-911")
    assert index.contains("713-911")
    assert "713-911" in index
    assert len(index) == 1


def test_load_skips_header_and_incomplete_rows():
    rows = [
        ['F1', 'F2'],
        ['100019', '100003'],
        [100043, 100049],
        ['100057'],
        ['', '100069'],
        [],
        ['abc', '100103'],
    ]
    index = PairIndex.load(lambda: rows)

    assert len(index) == 2
    assert index.contains("100003-100019")
    assert index.contains("100043-100049")


def test_header_row_is_never_indexed():
    index = PairIndex.load(lambda: [['100003', '100019']])
    assert len(index) == 0


def test_empty_source_gives_empty_index():
    assert len(PairIndex.load(lambda: [])) == 0
    assert len(PairIndex.load(lambda: None)) == 0


@pytest.mark.parametrize('error', [StoreReadError("down"), DatabaseError("locked"), OSError("timeout")])
def test_read_failure_degrades_to_empty_index(error):
    def source():
        raise error

    index = PairIndex.load(source)
    assert len(index) == 0


@pytest.mark.parametrize('payload', [{'error': 'quota'}, 5, 'F1,F2'])
def test_malformed_history_degrades_to_empty_index(payload):
    index = PairIndex.load(lambda: payload)
    assert len(index) == 0


@pytest.mark.parametrize('payload', [{'error': 'quota'}, 5])
def test_malformed_history_propagates_when_degrading_is_disabled(payload):
    with pytest.raises(StoreReadError):
        PairIndex.load(lambda: payload, degrade_available=False)


def test_malformed_rows_are_skipped():
    rows = [['F1', 'F2'], None, 100003, {'a': 1}, ('100019', '100003')]
    index = PairIndex.load(lambda: rows)

    assert len(index) == 1
    assert index.contains("100003-100019")


def test_read_failure_propagates_when_degrading_is_disabled():
    def source():
        raise StoreReadError("down")

    with pytest.raises(StoreReadError):
        PairIndex.load(source, degrade_available=False)

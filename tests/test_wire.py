from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from ledger.services.reports import FinancialReport
from ledger.serializers import FINANCIAL_REPORT_FIELDS
from sachetworks.errors import DomainValidationError
from sachetworks.money import to_money
from sachetworks.wire import FieldMap, parse_date, parse_date_range, parse_int, to_json_value


def test_end_date_is_exclusive(rf):
    start, end = parse_date_range(rf.get('/', {'startDate': '2024-03-01', 'endDate': '2024-04-01'}))
    assert start == date(2024, 3, 1)
    assert end == date(2024, 3, 31)


def test_open_ended_range(rf):
    assert parse_date_range(rf.get('/')) == (None, None)
    assert parse_date_range(rf.get('/', {'endDate': '2024-01-01'})) == (None, date(2023, 12, 31))


@pytest.mark.parametrize('query', [
    {'startDate': '2024-13-01'},
    {'endDate': 'yesterday'},
    {'startDate': '2024-03-05', 'endDate': '2024-03-05'},
])
def test_bad_ranges_rejected(rf, query):
    with pytest.raises(DomainValidationError):
        parse_date_range(rf.get('/', query))


def test_parse_date_ignores_time_part():
    assert parse_date('2024-03-11T23:00:00.000Z') == date(2024, 3, 11)
    assert parse_date('') is None


def test_parse_int():
    assert parse_int('12', 'employeeId') == 12
    assert parse_int(None, 'employeeId') is None
    with pytest.raises(DomainValidationError, match='employeeId'):
        parse_int('twelve', 'employeeId')


def test_field_map_only_loads_writable_names():
    fields = FieldMap({'bagsCount': 'bags_count'}, read_only={'id': 'id'})
    assert fields.load({'bagsCount': 3, 'id': 9, 'unknown': 1}) == {'bags_count': 3}
    assert fields.dump(SimpleNamespace(id=9, bags_count=3)) == {'id': 9, 'bagsCount': 3}
    assert fields.wire_name('bags_count') == 'bagsCount'
    with pytest.raises(DomainValidationError):
        fields.load(['not', 'an', 'object'])


def test_json_values():
    assert to_json_value(Decimal('12.50')) == 12.5
    assert to_json_value(date(2024, 3, 11)) == '2024-03-11'
    assert to_json_value(datetime(2024, 3, 11, 8, 0, tzinfo=timezone.utc)) == '2024-03-11T08:00:00+00:00'


def test_report_dataclass_dumps_with_camel_case():
    report = FinancialReport(period='monthly', start_date=date(2024, 3, 1), end_date=date(2024, 3, 31))
    data = FINANCIAL_REPORT_FIELDS.dump(report)
    assert data['startDate'] == '2024-03-01'
    assert data['profitMargin'] == 0.0
    assert data['partial'] is False


@pytest.mark.parametrize('value, expected', [
    ('0.005', Decimal('0.01')),
    ('2.675', Decimal('2.68')),
    (68.888, Decimal('68.89')),
    (None, Decimal('0.00')),
    (Decimal('-1.005'), Decimal('-1.01')),
])
def test_to_money_rounds_half_up(value, expected):
    assert to_money(value) == expected


def test_to_money_rejects_garbage():
    with pytest.raises(ValueError):
        to_money('lots')

import importlib
from decimal import Decimal

import pytest
from django.db import IntegrityError
from django.http import Http404

from ledger.models import Employee, SalaryPayment
from sachetworks.errors import ConflictError
from sachetworks.middleware import GENERIC_MESSAGE, JsonErrorMiddleware


@pytest.fixture
def middleware():
    return JsonErrorMiddleware(lambda request: None)


def test_health(client):
    resp = client.get('/api/health')
    assert resp.status_code == 200
    body = resp.json()
    assert body['success'] is True
    assert body['data']['status'] == 'ok'


def test_unknown_failure_is_sanitised(rf, middleware, settings):
    settings.DEBUG = False
    resp = middleware.process_exception(rf.get('/api/sales'), RuntimeError('no such table: ledger_sale'))
    assert resp.status_code == 500
    assert b'ledger_sale' not in resp.content
    assert GENERIC_MESSAGE.encode() in resp.content


def test_debug_shows_the_real_message(rf, middleware, settings):
    settings.DEBUG = True
    resp = middleware.process_exception(rf.get('/api/sales'), RuntimeError('boom'))
    assert b'boom' in resp.content


@pytest.mark.parametrize('exc, status', [
    (ConflictError('taken'), 409),
    (IntegrityError('UNIQUE constraint failed'), 409),
    (Http404(), 404),
])
def test_status_mapping(rf, middleware, exc, status):
    resp = middleware.process_exception(rf.post('/api/employees'), exc)
    assert resp.status_code == status


def test_non_api_paths_are_left_alone(rf, middleware):
    assert middleware.process_exception(rf.get('/admin/'), RuntimeError('boom')) is None


@pytest.mark.django_db
def test_missing_record_is_404(client):
    resp = client.get('/api/sales/999')
    assert resp.status_code == 404
    assert resp.json() == {'success': False, 'message': 'Sale not found'}


@pytest.mark.django_db
def test_invalid_json_is_400(client):
    resp = client.post('/api/expenses', data='{not json', content_type='application/json')
    assert resp.status_code == 400
    assert resp.json()['message'] == 'Invalid JSON'


@pytest.mark.django_db
def test_deleting_a_paid_employee_is_a_conflict(client):
    employee = Employee.objects.create(name='Ada', email='ada@example.com', role='Driver')
    SalaryPayment.objects.create(employee=employee, employee_name='Ada', period='first_half', period_start='2024-03-01',
                                 period_end='2024-03-15', total_amount=Decimal('5000'))
    resp = client.delete(f'/api/employees/{employee.pk}')
    assert resp.status_code == 409
    assert resp.json()['success'] is False
    assert Employee.objects.filter(pk=employee.pk).exists()


@pytest.mark.django_db
def test_wrong_method_is_rejected(client):
    assert client.patch('/api/reports/financial').status_code == 405


def test_debug_is_off_unless_enabled(monkeypatch):
    import sachetworks.settings as project_settings

    monkeypatch.setattr('dotenv.load_dotenv', lambda *args, **kwargs: False)
    monkeypatch.setenv('DJANGO_DEBUG', '1')
    assert importlib.reload(project_settings).DEBUG is True
    monkeypatch.delenv('DJANGO_DEBUG')
    assert importlib.reload(project_settings).DEBUG is False

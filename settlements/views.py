from django.views.decorators.http import require_GET, require_http_methods

from sachetworks.errors import NotFoundError
from sachetworks.ratelimit import rate_limited
from sachetworks.resources import Resource
from sachetworks.wire import (clean_payload, dump_all, filter_date_range, ok, parse_date_range, parse_int,
                              parse_json)

from . import services
from .forms import (ReceptionistSaleForm, SettlementCreateForm, SettlementPaymentForm, SettlementUpdateForm,
                    StorekeeperEntryForm)
from .models import ReceptionistSale, Settlement, SettlementPayment, StorekeeperEntry
from .serializers import (RECEPTIONIST_SALE_FIELDS, SETTLEMENT_CREATE_FIELDS, SETTLEMENT_FIELDS,
                          SETTLEMENT_PAYMENT_FIELDS, STOREKEEPER_ENTRY_FIELDS)


def _submitted_filter(request, qs):
    submitted = request.GET.get('isSubmitted')
    if submitted in ('true', '1'):
        qs = qs.filter(is_submitted=True)
    elif submitted in ('false', '0'):
        qs = qs.filter(is_submitted=False)
    return qs


def _entry_filter(request, qs):
    entry_type = request.GET.get('entryType')
    if entry_type:
        qs = qs.filter(entry_type=entry_type)
    return _submitted_filter(request, qs)


receptionist_sales = Resource(ReceptionistSale, ReceptionistSaleForm, RECEPTIONIST_SALE_FIELDS, 'Receptionist sale',
                              date_field='date', ordering=('-date', '-pk'), filter_queryset=_submitted_filter)
storekeeper_entries = Resource(StorekeeperEntry, StorekeeperEntryForm, STOREKEEPER_ENTRY_FIELDS, 'Storekeeper entry',
                               date_field='date', ordering=('-date', '-pk'), filter_queryset=_entry_filter)


def _settlement_data(settlement):
    data = SETTLEMENT_FIELDS.dump(settlement)
    data['payments'] = dump_all(SETTLEMENT_PAYMENT_FIELDS, settlement.payments.all())
    return data


def _get_settlement(pk):
    settlement = Settlement.objects.filter(pk=pk).first()
    if settlement is None:
        raise NotFoundError('Settlement not found')
    return settlement


@require_http_methods(['GET', 'POST'])
@rate_limited
def settlements(request):
    if request.method == 'POST':
        values = clean_payload(SettlementCreateForm, SETTLEMENT_CREATE_FIELDS.load(parse_json(request)),
                               SETTLEMENT_CREATE_FIELDS)
        settlement = services.create_settlement(
            values.get('date'),
            values['receptionist_sale_id'],
            values['expected_amount'],
            values.get('initial_settled_amount'),
            values['settled_by'],
            values.get('notes', ''),
        )
        return ok(_settlement_data(settlement), 'Settlement created successfully', status=201)

    start, end = parse_date_range(request)
    qs = filter_date_range(Settlement.objects.order_by('-date', '-pk'), 'date', start, end)
    sale_id = parse_int(request.GET.get('receptionistSaleId'), 'receptionistSaleId')
    if sale_id is not None:
        qs = qs.filter(receptionist_sale_id=sale_id)
    return ok(dump_all(SETTLEMENT_FIELDS, qs))


@require_http_methods(['GET', 'PUT', 'DELETE'])
def settlement_detail(request, pk):
    if request.method == 'PUT':
        changes = clean_payload(SettlementUpdateForm, SETTLEMENT_FIELDS.load(parse_json(request)), SETTLEMENT_FIELDS)
        settlement = services.update_settlement(pk, changes)
        return ok(_settlement_data(settlement), 'Settlement updated successfully')
    settlement = _get_settlement(pk)
    if request.method == 'DELETE':
        settlement.delete()
        return ok(None, 'Settlement deleted successfully')
    return ok(_settlement_data(settlement))


@require_http_methods(['GET', 'POST'])
@rate_limited
def settlement_payments(request):
    if request.method == 'POST':
        values = clean_payload(SettlementPaymentForm, SETTLEMENT_PAYMENT_FIELDS.load(parse_json(request)),
                               SETTLEMENT_PAYMENT_FIELDS)
        payment, settlement = services.record_payment(
            values['settlement'], values['amount'], values['paid_by'], values.get('paid_at'), values.get('notes', ''),
        )
        return ok({'payment': SETTLEMENT_PAYMENT_FIELDS.dump(payment), 'settlement': SETTLEMENT_FIELDS.dump(settlement)},
                  'Payment recorded successfully', status=201)
    qs = SettlementPayment.objects.order_by('paid_at', 'pk')
    start, end = parse_date_range(request)
    qs = filter_date_range(qs, 'paid_at__date', start, end)
    return ok(dump_all(SETTLEMENT_PAYMENT_FIELDS, qs))


@require_http_methods(['GET', 'DELETE'])
@rate_limited
def settlement_payment_detail(request, pk):
    if request.method == 'DELETE':
        settlement = services.delete_payment(pk)
        return ok({'settlement': SETTLEMENT_FIELDS.dump(settlement)}, 'Payment deleted successfully')
    payment = SettlementPayment.objects.filter(pk=pk).first()
    if payment is None:
        raise NotFoundError('Settlement payment not found')
    return ok(SETTLEMENT_PAYMENT_FIELDS.dump(payment))


@require_GET
def payments_for_settlement(request, settlement_id):
    settlement = _get_settlement(settlement_id)
    return ok(dump_all(SETTLEMENT_PAYMENT_FIELDS, settlement.payments.all()))

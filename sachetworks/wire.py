"""Translation between the camelCase JSON wire shape and model fields.

This is the only place where external field names meet internal ones. Each
entity declares one `FieldMap`; views never read request keys directly.

Date ranges: internally every range is `[start, end]` with both ends
inclusive. List endpoints receive `endDate` as an EXCLUSIVE bound (callers
pass the day after the last day they want), and `parse_date_range` converts
it exactly once.
"""
from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from django.core.exceptions import FieldDoesNotExist
from django.forms.models import model_to_dict
from django.http import HttpRequest, JsonResponse

from .errors import DomainValidationError


class FieldMap:
    """Explicit wire-name -> attribute table for one entity."""

    def __init__(self, writable: Dict[str, str], read_only: Optional[Dict[str, str]] = None):
        self.writable = dict(writable)
        self.read_only = dict(read_only or {})
        self._to_wire = {attr: name for name, attr in {**self.read_only, **self.writable}.items()}

    def dump(self, instance) -> dict:
        out = {}
        for name, attr in {**self.read_only, **self.writable}.items():
            out[name] = to_json_value(_read_attr(instance, attr))
        return out

    def load(self, payload) -> dict:
        if not isinstance(payload, dict):
            raise DomainValidationError('Request body must be a JSON object')
        return {attr: payload[name] for name, attr in self.writable.items() if name in payload}

    def wire_name(self, attr: str) -> str:
        return self._to_wire.get(attr, attr)


def _read_attr(instance, attr: str):
    try:
        field = instance._meta.get_field(attr)
    except (AttributeError, FieldDoesNotExist):
        field = None
    if field is not None and field.is_relation and field.many_to_one:
        return getattr(instance, field.attname)
    return getattr(instance, attr)


def to_json_value(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def ok(data=None, message: Optional[str] = None, status: int = 200) -> JsonResponse:
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return JsonResponse(body, status=status)


def parse_json(request: HttpRequest) -> dict:
    try:
        payload = json.loads(request.body.decode('utf-8') or '{}')
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise DomainValidationError('Invalid JSON')
    if not isinstance(payload, dict):
        raise DomainValidationError('Request body must be a JSON object')
    return payload


def parse_date(value, name: str = 'date') -> Optional[date]:
    """Parse `YYYY-MM-DD` (a trailing time part, as sent by browsers, is ignored)."""
    if value in (None, ''):
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    try:
        return date.fromisoformat(str(value).split('T')[0])
    except ValueError:
        raise DomainValidationError(f'Invalid {name}, expected YYYY-MM-DD')


def parse_date_range(request: HttpRequest) -> Tuple[Optional[date], Optional[date]]:
    """Return the inclusive `(start, end)` for `?startDate=&endDate=` (endDate exclusive)."""
    start = parse_date(request.GET.get('startDate'), 'startDate')
    end_exclusive = parse_date(request.GET.get('endDate'), 'endDate')
    end = end_exclusive - timedelta(days=1) if end_exclusive else None
    if start and end and end < start:
        raise DomainValidationError('endDate must be after startDate')
    return start, end


def filter_date_range(queryset, field: str, start: Optional[date], end: Optional[date]):
    if start:
        queryset = queryset.filter(**{f'{field}__gte': start})
    if end:
        queryset = queryset.filter(**{f'{field}__lte': end})
    return queryset


def parse_int(value, name: str) -> Optional[int]:
    if value in (None, ''):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DomainValidationError(f'Invalid {name}')


def bind_form(form_class, changes: dict, fields: FieldMap, instance=None):
    """Validate `changes` (model field names) on top of the instance's current values.

    New records start from an unsaved model instance so model defaults apply to
    anything the caller left out.
    """
    target = instance if instance is not None else form_class._meta.model()
    data = model_to_dict(target, fields=form_class._meta.fields)
    data.update(changes)
    form = form_class(data=data, instance=instance, supplied=changes.keys())
    if not form.is_valid():
        raise DomainValidationError(form_error_message(form, fields))
    return form


def form_error_message(form, fields: Optional[FieldMap] = None) -> str:
    parts = []
    for name, errors in form.errors.items():
        label = fields.wire_name(name) if fields and name != '__all__' else name
        text = ' '.join(str(e) for e in errors)
        parts.append(text if name == '__all__' else f'{label}: {text}')
    return '; '.join(parts) or 'Invalid data'


def dump_all(fields: FieldMap, rows: Iterable) -> list:
    return [fields.dump(r) for r in rows]


def clean_payload(form_class, changes: dict, fields: Optional[FieldMap] = None) -> dict:
    """Validate a plain (non-model) form and return only the keys the caller sent."""
    form = form_class(data=changes)
    if not form.is_valid():
        raise DomainValidationError(form_error_message(form, fields))
    return {name: value for name, value in form.cleaned_data.items() if name in changes}

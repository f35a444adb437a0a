"""Plain CRUD endpoints for entities that carry no reconciliation logic.

A `Resource` bundles a model, its payload form and its wire `FieldMap`, and
hands out two views: the collection (`GET` list, `POST` create) and the
detail (`GET`, `PUT` partial update, `DELETE`).
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from django.db import transaction
from django.http import HttpRequest
from django.views.decorators.http import require_http_methods

from .errors import NotFoundError
from .wire import FieldMap, bind_form, dump_all, filter_date_range, ok, parse_date_range, parse_json

logger = logging.getLogger(__name__)


class Resource:
    def __init__(
        self,
        model,
        form_class,
        fields: FieldMap,
        label: str,
        date_field: Optional[str] = None,
        ordering: Sequence[str] = ('-pk',),
        filter_queryset: Optional[Callable] = None,
        allow_update: bool = True,
    ):
        self.model = model
        self.form_class = form_class
        self.fields = fields
        self.label = label
        self.date_field = date_field
        self.ordering = tuple(ordering)
        self.filter_queryset = filter_queryset
        self.allow_update = allow_update

    def get_queryset(self, request: HttpRequest):
        qs = self.model.objects.all().order_by(*self.ordering)
        if self.date_field:
            start, end = parse_date_range(request)
            qs = filter_date_range(qs, self.date_field, start, end)
        if self.filter_queryset:
            qs = self.filter_queryset(request, qs)
        return qs

    def get_object(self, pk: int):
        obj = self.model.objects.filter(pk=pk).first()
        if obj is None:
            raise NotFoundError(f'{self.label} not found')
        return obj

    def list(self, request: HttpRequest):
        return ok(dump_all(self.fields, self.get_queryset(request)))

    def create(self, request: HttpRequest):
        changes = self.fields.load(parse_json(request))
        with transaction.atomic():
            obj = bind_form(self.form_class, changes, self.fields).save()
        logger.info('Created %s #%s', self.label, obj.pk)
        return ok(self.fields.dump(obj), f'{self.label} created successfully', status=201)

    def retrieve(self, request: HttpRequest, pk: int):
        return ok(self.fields.dump(self.get_object(pk)))

    def update(self, request: HttpRequest, pk: int):
        obj = self.get_object(pk)
        changes = self.fields.load(parse_json(request))
        with transaction.atomic():
            obj = bind_form(self.form_class, changes, self.fields, instance=obj).save()
        logger.info('Updated %s #%s (%s)', self.label, obj.pk, ', '.join(sorted(changes)) or 'no changes')
        return ok(self.fields.dump(obj), f'{self.label} updated successfully')

    def delete(self, request: HttpRequest, pk: int):
        obj = self.get_object(pk)
        obj.delete()
        logger.info('Deleted %s #%s', self.label, pk)
        return ok(None, f'{self.label} deleted successfully')

    def collection_view(self):
        @require_http_methods(['GET', 'POST'])
        def view(request: HttpRequest):
            if request.method == 'POST':
                return self.create(request)
            return self.list(request)

        return view

    def detail_view(self):
        methods = ['GET', 'PUT', 'DELETE'] if self.allow_update else ['GET', 'DELETE']

        @require_http_methods(methods)
        def view(request: HttpRequest, pk: int):
            if request.method == 'PUT':
                return self.update(request, pk)
            if request.method == 'DELETE':
                return self.delete(request, pk)
            return self.retrieve(request, pk)

        return view

from decimal import Decimal, InvalidOperation

from django import forms
from django.utils import timezone

from pricing.services import get_settings
from sachetworks.forms import PayloadModelForm
from sachetworks.money import to_money

from .models import ReceptionistSale, StorekeeperEntry


class ReceptionistSaleForm(PayloadModelForm):
    """Derives total bags and the expected cash from what was sold.

    Bags come from the price breakdown when one is given, otherwise from the two
    legacy price tiers. An explicit positive expected amount is kept as sent.
    """

    class Meta:
        model = ReceptionistSale
        fields = ['date', 'driver', 'driver_name', 'sale_type', 'bags_at_price_1', 'bags_at_price_2',
                  'price_breakdown', 'expected_amount', 'submitted_by', 'is_submitted', 'notes']

    def clean_price_breakdown(self):
        value = self.cleaned_data.get('price_breakdown') or []
        if not isinstance(value, list):
            raise forms.ValidationError('Must be a list of {priceId, amount, bags}.')
        lines = []
        for line in value:
            if not isinstance(line, dict):
                raise forms.ValidationError('Each line must be an object.')
            try:
                amount = Decimal(str(line.get('amount', 0)))
                bags = int(line.get('bags', 0))
            except (InvalidOperation, TypeError, ValueError):
                raise forms.ValidationError('Each line needs a numeric amount and bags.')
            if amount < 0 or bags < 0:
                raise forms.ValidationError('Amounts and bags must not be negative.')
            lines.append({'priceId': line.get('priceId'), 'amount': float(amount), 'bags': bags})
        return lines

    def clean(self):
        cleaned = super().clean()
        if self.errors:
            return cleaned
        breakdown = cleaned.get('price_breakdown') or []
        bags_1 = cleaned.get('bags_at_price_1') or 0
        bags_2 = cleaned.get('bags_at_price_2') or 0
        self.instance.total_bags = sum(line['bags'] for line in breakdown) if breakdown else bags_1 + bags_2

        explicit = cleaned.get('expected_amount')
        explicit = explicit if 'expected_amount' in self.supplied and explicit and explicit > 0 else None
        repriced = bool(self.supplied & {'price_breakdown', 'bags_at_price_1', 'bags_at_price_2'})
        if explicit is not None:
            cleaned['expected_amount'] = explicit
        elif self.instance.pk is None or repriced:
            cleaned['expected_amount'] = self._derive_expected(breakdown, bags_1, bags_2)

        if cleaned.get('is_submitted') and self.instance.submitted_at is None:
            self.instance.submitted_at = timezone.now()
        return cleaned

    @staticmethod
    def _derive_expected(breakdown, bags_1, bags_2) -> Decimal:
        if breakdown:
            return to_money(sum(Decimal(str(line['amount'])) * line['bags'] for line in breakdown))
        settings = get_settings()
        return to_money(bags_1 * settings.sales_price_1 + bags_2 * settings.sales_price_2)


class StorekeeperEntryForm(PayloadModelForm):
    class Meta:
        model = StorekeeperEntry
        fields = ['date', 'entry_type', 'driver', 'driver_name', 'packer', 'packer_name', 'bags_count',
                  'submitted_by', 'is_submitted', 'notes']

    def clean(self):
        cleaned = super().clean()
        for person, name in (('driver', 'driver_name'), ('packer', 'packer_name')):
            if cleaned.get(person) is not None and not cleaned.get(name):
                cleaned[name] = cleaned[person].name
        return cleaned


class SettlementCreateForm(forms.Form):
    date = forms.DateField(required=False)
    receptionist_sale_id = forms.IntegerField(min_value=1)
    expected_amount = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))
    initial_settled_amount = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'),
                                                required=False)
    settled_by = forms.IntegerField()
    notes = forms.CharField(required=False)


class SettlementUpdateForm(forms.Form):
    date = forms.DateField(required=False)
    expected_amount = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'), required=False)
    settled_at = forms.DateTimeField(required=False)
    notes = forms.CharField(required=False)


class SettlementPaymentForm(forms.Form):
    settlement = forms.IntegerField(min_value=1)
    amount = forms.DecimalField(max_digits=12, decimal_places=2)
    paid_by = forms.IntegerField()
    paid_at = forms.DateTimeField(required=False)
    notes = forms.CharField(required=False)

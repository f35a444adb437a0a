from django.views.decorators.http import require_http_methods

from sachetworks.ratelimit import rate_limited
from sachetworks.resources import Resource
from sachetworks.wire import ok, parse_json

from .forms import BagPriceForm, MaterialPriceForm
from .models import BagPrice, MaterialPrice
from .serializers import BAG_PRICE_FIELDS, MATERIAL_PRICE_FIELDS, SETTINGS_FIELDS
from .services import get_settings, update_settings


@require_http_methods(['GET', 'PUT'])
@rate_limited
def settings_detail(request):
    if request.method == 'PUT':
        saved = update_settings(SETTINGS_FIELDS.load(parse_json(request)))
        return ok(SETTINGS_FIELDS.dump(saved), 'Settings updated successfully')
    return ok(SETTINGS_FIELDS.dump(get_settings()))


def _flag(value) -> bool:
    return value not in (None, '', '0', 'false', 'False')


def _active_only(request, qs):
    if not _flag(request.GET.get('includeInactive')):
        qs = qs.filter(is_active=True)
    return qs


def _material_filter(request, qs):
    material_type = request.GET.get('type')
    if material_type:
        qs = qs.filter(type=material_type)
    return _active_only(request, qs)


bag_prices = Resource(
    BagPrice, BagPriceForm, BAG_PRICE_FIELDS, 'Bag price',
    ordering=('sort_order', 'pk'), filter_queryset=_active_only,
)
material_prices = Resource(
    MaterialPrice, MaterialPriceForm, MATERIAL_PRICE_FIELDS, 'Material price',
    ordering=('sort_order', 'pk'), filter_queryset=_material_filter,
)

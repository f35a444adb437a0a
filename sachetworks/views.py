from django.conf import settings
from django.utils import timezone
from django.views.decorators.http import require_GET

from .wire import ok


@require_GET
def health(request):
    """Liveness probe; also reports the deployed version."""
    return ok({
        'status': 'ok',
        'version': getattr(settings, 'APP_VERSION', 'dev'),
        'time': timezone.now().isoformat(),
    })

import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from django.http import Http404, JsonResponse

from .errors import DomainError

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = 'An error occurred. Please try again later.'


class JsonErrorMiddleware:
    """Turn exceptions raised by API views into `{success: false, message}` responses.

    Domain errors carry their own status. Unknown failures are logged with the
    full traceback and reported to the client as a sanitised 500.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith('/api/'):
            return None
        if isinstance(exception, DomainError):
            if exception.status >= 500:
                logger.error('%s %s failed: %s', request.method, request.path, exception.message)
            return _failure(exception.message, exception.status)
        if isinstance(exception, (Http404, ObjectDoesNotExist)):
            return _failure('Not found', 404)
        if isinstance(exception, IntegrityError):
            logger.warning('%s %s conflict: %s', request.method, request.path, exception)
            return _failure('The change conflicts with an existing record', 409)
        logger.exception('Unhandled error on %s %s', request.method, request.path)
        message = str(exception) if settings.DEBUG else GENERIC_MESSAGE
        return _failure(message or GENERIC_MESSAGE, 500)


def _failure(message: str, status: int) -> JsonResponse:
    return JsonResponse({'success': False, 'message': message}, status=status)

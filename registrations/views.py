import functools
import json
import logging

from django.core.signals import setting_changed
from django.dispatch import receiver
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .batch import normalize_request, register
from .notify import TelegramNotifier
from .ocr import GeminiReceiptReader
from .store import TicketLedger

logger = logging.getLogger(__name__)

COLLABORATOR_SETTINGS = {'TELEGRAM_BOT_TOKEN', 'TELEGRAM_CHAT_ID', 'GEMINI_API_KEY', 'GEMINI_MODEL'}


@functools.lru_cache(maxsize=None)
def collaborators():
    """Notifier and receipt reader, built once per process."""
    return TelegramNotifier.from_settings(), GeminiReceiptReader.from_settings()


@receiver(setting_changed)
def reset_collaborators(setting, **kwargs):
    if setting in COLLABORATOR_SETTINGS:
        collaborators.cache_clear()


def _request_data(request):
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            logger.warning("Request body is not valid JSON")
            return {}
        return data if isinstance(data, dict) else {}
    return request.POST


@csrf_exempt
@require_POST
def submit_registration(request):
    """
    Register every attendee of one purchase and return their purchase codes.
    """
    try:
        data = _request_data(request)
        upload = request.FILES.get('proof')
        proof = upload.read() if upload else None

        registration = normalize_request(data, proof=proof)
        notifier, ocr = collaborators()
        result = register(registration, store=TicketLedger(), notifier=notifier, ocr=ocr)
    except Exception:
        logger.exception("Error processing registration")
        return JsonResponse({'message': 'Fallo al procesar el registro.'}, status=500)

    return JsonResponse({
        'message': 'Registro de múltiples asistentes exitoso!',
        'codes': result.codes,
    })

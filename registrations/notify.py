"""
Sales summaries sent to the organisers' Telegram chat.
"""
import logging

import requests
from django.conf import settings

from .exceptions import NotificationError

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/{method}"
NOT_DETECTED = 'No detectado'


def build_summary(buyer, total_amount, codes, receipt):
    id_list = '\n'.join(f"`{code}`" for code in codes)
    sender = receipt.sender if receipt.sender not in ('', 'N/A') else NOT_DETECTED
    amount = receipt.amount if receipt.amount not in ('', 'N/A') else NOT_DETECTED
    return (
        "✅ *Nueva Venta Registrada*\n"
        "\n"
        f"*Comprador:* {buyer.name}\n"
        f"*Monto Pagado:* {total_amount}\n"
        "\n"
        "--- IDs de Entradas ---\n"
        f"{id_list}\n"
        "\n"
        "--- Verificación OCR ---\n"
        f"Emisor: {sender}\n"
        f"Monto (OCR): {amount}\n"
    )


class TelegramNotifier:

    def __init__(self, token, chat_id, session=None, timeout=10):
        self.token = token
        self.chat_id = chat_id
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls):
        token = getattr(settings, 'TELEGRAM_BOT_TOKEN', '')
        chat_id = getattr(settings, 'TELEGRAM_CHAT_ID', '')
        if not token or not chat_id:
            logger.warning("TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID not configured - notifications disabled")
            return None
        return cls(token, chat_id)

    def _url(self, method):
        return TELEGRAM_API_URL.format(token=self.token, method=method)

    def send(self, summary, photo=None):
        """Send the summary, attached to the proof of payment when there is one."""
        try:
            if photo:
                response = self.session.post(
                    self._url('sendPhoto'),
                    data={'chat_id': self.chat_id, 'caption': summary, 'parse_mode': 'Markdown'},
                    files={'photo': ('proof.jpg', photo, 'image/jpeg')},
                    timeout=self.timeout,
                )
            else:
                response = self.session.post(
                    self._url('sendMessage'),
                    json={'chat_id': self.chat_id, 'text': summary, 'parse_mode': 'Markdown'},
                    timeout=self.timeout,
                )
            response.raise_for_status()
        except requests.RequestException as e:
            raise NotificationError(f"Telegram request failed: {e}") from e
        return response

"""
Reading sender, receiver, amount and date from a payment receipt image.
"""
import base64
import io
import json
import logging
from dataclasses import dataclass

import requests
from django.conf import settings
from PIL import Image, UnidentifiedImageError

from .exceptions import InvalidProofImage

logger = logging.getLogger(__name__)

NOT_FOUND = 'N/A'
GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_GEMINI_MODEL = 'gemini-2.5-pro'

RECEIPT_PROMPT = """
Eres un sistema experto de extracción de datos de comprobantes de pago de Bolivia. Tu tarea es analizar una imagen de un comprobante y extraer la siguiente información en un formato JSON estricto.

Extrae los siguientes campos:
- "sender": El nombre completo de la persona o entidad que envió el dinero. Busca el nombre asociado a etiquetas clave como 'Pagado por', 'De', 'Enviado por', 'Ordenante', 'Remitente', 'Pagador', 'Nombre titular', 'Nombre del originante' o junto a 'Cuenta de origen'. **Importante:** Algunos comprobantes, especialmente los más simples o generados por cajeros, pueden no mostrar el nombre del remitente. En estos casos, si el nombre no está visible de forma explícita, el valor debe ser "No encontrado".
- "receiver": El nombre completo de la persona o entidad que recibió el dinero. Busca el nombre asociado a etiquetas como 'A:', 'Para', 'Enviado a', 'Beneficiario', 'Destinatario', 'Nombre del beneficiario', 'Cuenta de destino', 'Cuenta acreditada' o 'Solicitante'.
- "amount": El monto de la transacción. Extráelo como un string numérico, usando siempre el punto como separador decimal (ejemplo: "100.00"). Ignora cualquier símbolo de moneda (como Bs. o BOB) y si encuentras una coma decimal, conviértela en punto.
- "dateTime": La fecha y hora exactas de la transacción tal como aparecen en el comprobante. Mantén el formato original que encuentres (ej: "06/10/2025 19:27", "02/Oct/2025 20:25:04").

Reglas Adicionales:
- Si un campo no se puede encontrar en la imagen, usa el valor de string "No encontrado".
- Tu respuesta debe ser únicamente el objeto JSON, sin explicaciones ni texto adicional.
"""


@dataclass
class ReceiptFields:
    sender: str = NOT_FOUND
    receiver: str = NOT_FOUND
    amount: str = NOT_FOUND
    date_time: str = NOT_FOUND

    @classmethod
    def failed(cls):
        return cls(sender='404', receiver='404', amount='404', date_time='404')


def normalize_proof(raw):
    """Re-encode an uploaded image as RGB JPEG bytes."""
    try:
        img = Image.open(io.BytesIO(raw)).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidProofImage(f"Unreadable proof image: {e}") from e

    buffer = io.BytesIO()
    img.save(buffer, format='JPEG', quality=95)
    return buffer.getvalue()


def parse_model_reply(text):
    cleaned = text.replace('```json', '').replace('```', '').strip()
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return ReceiptFields(
        sender=str(data.get('sender') or NOT_FOUND),
        receiver=str(data.get('receiver') or NOT_FOUND),
        amount=str(data.get('amount') or NOT_FOUND),
        date_time=str(data.get('dateTime') or NOT_FOUND),
    )


class GeminiReceiptReader:

    def __init__(self, api_key, model=DEFAULT_GEMINI_MODEL, session=None, timeout=60):
        self.api_key = api_key
        self.model = model
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls):
        api_key = getattr(settings, 'GEMINI_API_KEY', '')
        if not api_key:
            logger.warning("GEMINI_API_KEY not configured - receipt OCR disabled")
            return None
        return cls(api_key, model=getattr(settings, 'GEMINI_MODEL', DEFAULT_GEMINI_MODEL))

    def extract(self, jpeg_bytes):
        """
        Ask the model for the receipt fields. Any failure yields the "404"
        receipt so that registration is not blocked by OCR.
        """
        payload = {
            "contents": [{
                "parts": [
                    {"text": RECEIPT_PROMPT},
                    {"inline_data": {
                        "mime_type": "image/jpeg",
                        "data": base64.b64encode(jpeg_bytes).decode('ascii'),
                    }},
                ],
            }],
        }
        try:
            response = self.session.post(
                GEMINI_API_URL.format(model=self.model),
                params={'key': self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            text = response.json()['candidates'][0]['content']['parts'][0]['text']
            return parse_model_reply(text)
        except (requests.RequestException, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Receipt extraction failed: %s", e)
            return ReceiptFields.failed()

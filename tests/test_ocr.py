import base64

import pytest
import requests

from registrations.exceptions import InvalidProofImage
from registrations.ocr import RECEIPT_PROMPT, GeminiReceiptReader, ReceiptFields, normalize_proof, parse_model_reply

from conftest import FakeResponse, FakeSession

REPLY = '```json\n{"sender": "Carla Rojas", "receiver": "Eventos SRL", "amount": "150.00", "dateTime": "06/10/2025 19:27"}\n```'


def gemini_response(text):
    return FakeResponse({'candidates': [{'content': {'parts': [{'text': text}]}}]})


def test_parse_reply_strips_code_fences():
    assert parse_model_reply(REPLY) == ReceiptFields(
        sender='Carla Rojas', receiver='Eventos SRL', amount='150.00', date_time='06/10/2025 19:27')


def test_parse_reply_fills_missing_fields():
    assert parse_model_reply('{"sender": "Carla"}') == ReceiptFields(sender='Carla')


def test_parse_reply_rejects_non_objects():
    with pytest.raises(ValueError):
        parse_model_reply('["Carla"]')


def test_extract_posts_inline_jpeg():
    session = FakeSession(response=gemini_response(REPLY))
    reader = GeminiReceiptReader('KEY', model='gemini-test', session=session)

    receipt = reader.extract(b'\xff\xd8jpeg')

    assert receipt.sender == 'Carla Rojas'
    url, kwargs = session.calls[0]
    assert url.endswith('/models/gemini-test:generateContent')
    assert kwargs['params'] == {'key': 'KEY'}
    inline = kwargs['json']['contents'][0]['parts'][1]['inline_data']
    assert inline['mime_type'] == 'image/jpeg'
    assert base64.b64decode(inline['data']) == b'\xff\xd8jpeg'


@pytest.mark.parametrize('session', [
    FakeSession(error=requests.Timeout("slow")),
    FakeSession(response=FakeResponse(status_code=500)),
    FakeSession(response=FakeResponse({'candidates': []})),
    FakeSession(response=gemini_response('Lo siento, no puedo leer la imagen')),
])
def test_extract_failure_returns_sentinel(session):
    receipt = GeminiReceiptReader('KEY', session=session).extract(b'\xff\xd8')
    assert receipt == ReceiptFields.failed()


def test_normalize_proof_outputs_jpeg(png_bytes):
    assert normalize_proof(png_bytes).startswith(b'\xff\xd8')


def test_normalize_proof_rejects_garbage():
    with pytest.raises(InvalidProofImage):
        normalize_proof(b'definitely not an image')


def test_from_settings(settings):
    settings.GEMINI_API_KEY = ''
    assert GeminiReceiptReader.from_settings() is None

    settings.GEMINI_API_KEY = 'KEY'
    settings.GEMINI_MODEL = 'gemini-test'
    assert GeminiReceiptReader.from_settings().model == 'gemini-test'


def test_prompt_asks_for_point_decimals_and_original_date_format():
    assert 'si encuentras una coma decimal, conviértela en punto' in RECEIPT_PROMPT
    assert '"02/Oct/2025 20:25:04"' in RECEIPT_PROMPT
    assert 'generados por cajeros' in RECEIPT_PROMPT

import io
import random

import pytest
import requests
from PIL import Image

from registrations.exceptions import NotificationError, StoreReadError
from registrations.primes import is_prime

SMALL_SIX_DIGIT_PRIMES = [n for n in range(100000, 100200) if is_prime(n)]


class ScriptedRandom:
    """randint() replays a fixed script; choice() is seeded."""

    def __init__(self, script):
        self.script = list(script)
        self._random = random.Random(0)

    def randint(self, a, b):
        value = self.script.pop(0)
        assert a <= value <= b
        return value

    def choice(self, seq):
        return self._random.choice(seq)


class FakeStore:

    def __init__(self, history=None, fail_read=False, append_errors=()):
        self.history = history if history is not None else [['F1', 'F2']]
        self.fail_read = fail_read
        self.append_errors = list(append_errors)
        self.reads = 0
        self.appended = []

    def read_pair_history(self):
        self.reads += 1
        if self.fail_read:
            raise StoreReadError("sheet unavailable")
        return self.history

    def append_rows(self, rows):
        if self.append_errors:
            raise self.append_errors.pop(0)
        self.appended.append(rows)
        return rows


class FakeNotifier:

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send(self, summary, photo=None):
        if self.fail:
            raise NotificationError("telegram down")
        self.sent.append((summary, photo))


class FakeResponse:

    def __init__(self, payload=None, status_code=200):
        self.payload = payload or {}
        self.status_code = status_code

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse({'ok': True})
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new('RGBA', (20, 10), (255, 0, 0, 128)).save(buffer, format='PNG')
    return buffer.getvalue()

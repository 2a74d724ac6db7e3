"""
Issuance of purchase codes and unique prime pairs.
"""
import logging
import string
from dataclasses import dataclass

from django.conf import settings

from .exceptions import PairSpaceExhausted
from .pairs import pair_key
from .primes import system_random, sample_six_digit_prime

logger = logging.getLogger(__name__)

PURCHASE_CODE_ALPHABET = string.ascii_uppercase + string.digits
PURCHASE_CODE_LENGTH = 8
PAIR_CLAIM_ATTEMPTS = 1000


@dataclass(frozen=True)
class IssuedCode:
    purchase_code: str
    prime_a: int
    prime_b: int
    product: int
    attempts: int = 1

    @property
    def pair_key(self):
        return pair_key(self.prime_a, self.prime_b)


def generate_purchase_code(rng=None):
    # Purchase codes are not checked against history; the prime pair is the
    # identifier that must be unique.
    rng = rng or system_random
    return ''.join(rng.choice(PURCHASE_CODE_ALPHABET) for _ in range(PURCHASE_CODE_LENGTH))


def issue_one(index, rng=None, max_attempts=None):
    """
    Mint a purchase code and claim a prime pair not yet present in ``index``.

    The claimed key is inserted into ``index`` before returning, so later
    attendees of the same batch cannot receive the same pair.
    """
    rng = rng or system_random
    if max_attempts is None:
        max_attempts = getattr(settings, 'REGISTRATION_PAIR_ATTEMPTS', PAIR_CLAIM_ATTEMPTS)

    purchase_code = generate_purchase_code(rng)

    for attempt in range(1, max_attempts + 1):
        prime_a = sample_six_digit_prime(rng)
        prime_b = sample_six_digit_prime(rng)
        if prime_a == prime_b:
            continue
        key = pair_key(prime_a, prime_b)
        if index.contains(key):
            continue

        index.insert(key)
        logger.debug("Claimed pair %s for %s in %d attempt(s)", key, purchase_code, attempt)
        return IssuedCode(
            purchase_code=purchase_code,
            prime_a=prime_a,
            prime_b=prime_b,
            product=prime_a * prime_b,
            attempts=attempt,
        )

    raise PairSpaceExhausted(f"No unused prime pair found after {max_attempts} attempts")

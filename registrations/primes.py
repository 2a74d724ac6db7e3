"""
Primality test and six-digit prime sampling for ticket codes.
"""
import random

from django.conf import settings

from .exceptions import PrimeSamplingExhausted

SIX_DIGIT_MIN = 100000
SIX_DIGIT_MAX = 999999
PRIME_SAMPLE_ATTEMPTS = 10000

system_random = random.SystemRandom()


def is_prime(n):
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    # Remaining candidates are of the form 6k-1 and 6k+1
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def sample_six_digit_prime(rng=None, max_attempts=None):
    """
    Draw uniform integers in [100000, 999999] until one is prime.

    Roughly one draw in thirteen is prime in that range, so the attempt
    ceiling is only reached if the random source is broken.
    """
    rng = rng or system_random
    if max_attempts is None:
        max_attempts = getattr(settings, 'REGISTRATION_PRIME_ATTEMPTS', PRIME_SAMPLE_ATTEMPTS)

    for _ in range(max_attempts):
        candidate = rng.randint(SIX_DIGIT_MIN, SIX_DIGIT_MAX)
        if is_prime(candidate):
            return candidate

    raise PrimeSamplingExhausted(
        f"No prime found in [{SIX_DIGIT_MIN}, {SIX_DIGIT_MAX}] after {max_attempts} draws"
    )

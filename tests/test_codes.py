import random
import string

import pytest

from registrations.codes import generate_purchase_code, issue_one
from registrations.exceptions import PairSpaceExhausted
from registrations.pairs import PairIndex, pair_key
from registrations.primes import is_prime

from conftest import SMALL_SIX_DIGIT_PRIMES, ScriptedRandom


def test_purchase_code_shape(rng):
    for _ in range(100):
        code = generate_purchase_code(rng)
        assert len(code) == 8
        assert set(code) <= set(string.ascii_uppercase + string.digits)


def test_issue_one_claims_pair_in_index(rng):
    index = PairIndex()
    issued = issue_one(index, rng=rng)

    assert issued.prime_a != issued.prime_b
    assert is_prime(issued.prime_a) and is_prime(issued.prime_b)
    assert issued.product == issued.prime_a * issued.prime_b
    assert index.contains(issued.pair_key)
    assert len(index) == 1


def test_issue_one_rejects_known_and_equal_pairs():
    p1, p2, p3, p4 = SMALL_SIX_DIGIT_PRIMES[:4]
    index = PairIndex([pair_key(p1, p2)])
    rng = ScriptedRandom([
        p1, p2,  # already issued
        p2, p1,  # same pair, other order
        p3, p3,  # equal primes
        p3, p4,
    ])

    issued = issue_one(index, rng=rng)

    assert (issued.prime_a, issued.prime_b) == (p3, p4)
    assert issued.attempts == 4
    assert len(index) == 2


def test_issue_one_gives_up_after_attempt_ceiling():
    p = SMALL_SIX_DIGIT_PRIMES[0]
    rng = ScriptedRandom([p] * 6)
    with pytest.raises(PairSpaceExhausted):
        issue_one(PairIndex(), rng=rng, max_attempts=3)


def test_consecutive_claims_never_repeat_a_pair():
    index = PairIndex()
    rng = random.Random(99)
    keys = [issue_one(index, rng=rng).pair_key for _ in range(200)]
    assert len(set(keys)) == 200

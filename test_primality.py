import random
import pytest
import sympy

from primegen.biguint import BigUint, Width
from primegen.candidates import make_rng, random_in_range, random_odd
from primegen.errors import BitLengthError
from primegen.miller_rabin import (
    check_candidate, decompose, error_bound, is_probable_prime, reduce_witness, witness_passes,
)
from primegen.sieve import EXACT_LIMIT, SMALL_PRIMES, SieveVerdict, quick_reject, sieve_decides

NATIVE = Width.native()
LIMBS = Width(2, 32)

MERSENNE_31 = 2**31 - 1
# strong pseudoprime to bases 2, 3, 5 and 7
SPSP_2357 = 3215031751


def big(v, w=LIMBS):
    return BigUint.from_int(v, w)


# ---------- sieve ----------

def test_small_prime_table():
    assert len(SMALL_PRIMES) == 46
    assert list(SMALL_PRIMES) == list(sympy.primerange(2, 200))


@pytest.mark.parametrize("p", SMALL_PRIMES)
def test_every_small_prime_is_an_exact_match(p):
    assert quick_reject(big(p)) is SieveVerdict.EXACT_MATCH
    assert quick_reject(big(p, NATIVE)) is SieveVerdict.EXACT_MATCH


def test_quick_reject_divisible_and_neither():
    assert quick_reject(big(3 * 199)) is SieveVerdict.DIVISIBLE
    assert quick_reject(big(2**40)) is SieveVerdict.DIVISIBLE
    assert quick_reject(big(211 * 223)) is SieveVerdict.NEITHER
    assert quick_reject(big(MERSENNE_31)) is SieveVerdict.NEITHER


def test_sieve_is_exact_below_its_limit():
    for v in range(0, 3000):
        assert sieve_decides(big(v)) == sympy.isprime(v), v
    rng = random.Random(5)
    for _ in range(300):
        v = rng.randrange(3000, EXACT_LIMIT)
        assert sieve_decides(big(v)) == sympy.isprime(v), v


def test_sieve_leaves_large_survivors_undecided():
    assert sieve_decides(big(211 * 211)) is None
    assert sieve_decides(big(MERSENNE_31)) is None


def test_sieve_decides_reuses_a_given_verdict():
    n = big(211 * 223)
    assert sieve_decides(n, SieveVerdict.NEITHER) is None
    assert sieve_decides(big(211), SieveVerdict.NEITHER) is True
    assert sieve_decides(big(3 * 199), SieveVerdict.DIVISIBLE) is False


# ---------- candidates ----------

@pytest.mark.parametrize("bits", [2, 3, 17, 30, 32, 33, 64, 100])
def test_random_odd_has_exact_bit_length_and_is_odd(bits):
    for seed in range(50):
        v = int(random_odd(bits, make_rng(seed)))
        assert v.bit_length() == bits
        assert v & 1


def test_random_odd_in_an_explicit_multi_limb_width():
    w = Width(4, 8)
    for bits in range(2, 33):
        v = random_odd(bits, make_rng(bits), w)
        assert v.width == w
        assert int(v).bit_length() == bits and int(v) & 1


def test_random_odd_rejects_bad_bit_lengths():
    with pytest.raises(BitLengthError):
        random_odd(1, make_rng(0))
    with pytest.raises(BitLengthError):
        random_odd(0, make_rng(0))
    with pytest.raises(BitLengthError):
        random_odd(33, make_rng(0), Width(1, 32))


def test_random_odd_is_reproducible_per_seed():
    assert random_odd(64, make_rng(9)) == random_odd(64, make_rng(9))


def test_random_in_range_stays_in_two_to_n_minus_two():
    rng = make_rng(1)
    for n in (5, 7, 101, MERSENNE_31, SPSP_2357):
        for _ in range(200):
            a = int(random_in_range(big(n), rng))
            assert 2 <= a <= n - 2
    assert int(random_in_range(big(4), rng)) == 2


# ---------- Miller–Rabin ----------

def test_decompose():
    d, s = decompose(big(MERSENNE_31))
    assert (int(d), s) == (2**30 - 1, 1)
    d, s = decompose(big(97))
    assert (int(d), s) == (3, 5)


def test_reduce_witness_returns_a_new_value():
    n = big(2047)
    a = big(2047 + 5)
    r = reduce_witness(a, n)
    assert int(r) == 5
    assert int(a) == 2047 + 5
    assert reduce_witness(big(9), n) == big(9)


@pytest.mark.parametrize("w", [NATIVE, LIMBS, Width(4, 16)])
def test_known_witnesses(w):
    # 2047 = 23 * 89 fools base 2, 341 = 11 * 31 does not
    assert witness_passes(big(2047, w), big(2, w))
    assert not witness_passes(big(341, w), big(2, w))
    for base in (2, 3, 5, 7):
        assert witness_passes(big(SPSP_2357, w), big(base, w))
    assert not witness_passes(big(SPSP_2357, w), big(11, w))


def test_degenerate_witness_passes():
    assert witness_passes(big(2047), big(2047))
    assert witness_passes(big(2047), big(2047 * 2))


@pytest.mark.parametrize("w", [NATIVE, LIMBS])
def test_mersenne_31_is_prime_for_every_seed(w):
    for seed in range(20):
        assert is_probable_prime(big(MERSENNE_31, w), 10, make_rng(seed))


@pytest.mark.parametrize("w", [NATIVE, LIMBS])
def test_strong_pseudoprime_is_caught(w):
    for seed in range(20):
        assert not is_probable_prime(big(SPSP_2357, w), 10, make_rng(seed))


def test_agrees_with_sympy_on_64_bit_values():
    rng = random.Random(17)
    for seed in range(5):
        p = int(sympy.randprime(2**63, 2**64))
        q = int(sympy.randprime(2**31, 2**32))
        r = int(sympy.randprime(2**31, 2**32))
        assert is_probable_prime(big(p), 5, make_rng(seed))
        assert not is_probable_prime(big(q * r), 5, make_rng(seed))
        v = rng.getrandbits(64) | 1
        assert is_probable_prime(big(v, NATIVE), 10, make_rng(seed)) == sympy.isprime(v)


def test_report_collects_every_round_drawn():
    report = []
    assert is_probable_prime(big(MERSENNE_31), 5, make_rng(3), report)
    assert [r.index for r in report] == [1, 2, 3, 4, 5]
    assert all(r.passed for r in report)
    assert all(2 <= int(r.base) <= MERSENNE_31 - 2 for r in report)


def test_failing_round_short_circuits():
    report = []
    assert not is_probable_prime(big(SPSP_2357), 10, make_rng(3), report)
    assert not report[-1].passed
    assert all(r.passed for r in report[:-1])


def test_error_bound():
    assert error_bound(10) == 4.0 ** -10
    assert error_bound(1) == 0.25


# ---------- verbose check ----------

def test_check_candidate_verdicts():
    assert check_candidate(big(197)).verdict == "small-prime"
    r = check_candidate(big(60))
    assert (r.verdict, r.small_prime) == ("divisible", 2)
    assert check_candidate(big(1)).verdict == "not-prime"
    assert check_candidate(big(0)).verdict == "not-prime"
    assert check_candidate(big(211)).verdict == "prime"


def test_check_candidate_runs_every_round():
    r = check_candidate(big(MERSENNE_31), 10, make_rng(2))
    assert r.verdict == "probably-prime" and r.is_prime
    assert len(r.rounds) == 10

    r = check_candidate(big(SPSP_2357), 10, make_rng(2))
    assert r.verdict == "composite" and not r.is_prime
    assert len(r.rounds) == 10
    d = r.as_dict()
    assert d["n"] == hex(SPSP_2357)
    assert len(d["rounds"]) == 10 and all(b["base"].startswith("0x") for b in d["rounds"])

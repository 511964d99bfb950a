# primegen/sieve.py
# Trial division by the primes below 200.
# - quick_reject(): exact match, divisible, or neither
# - sieve_decides(): settles primality outright below 199^2

from __future__ import annotations
import enum
from typing import Optional, Tuple

from .biguint import BigUint, mod_small

# every prime below 200
SMALL_PRIMES: Tuple[int, ...] = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29,
    31, 37, 41, 43, 47, 53, 59, 61, 67, 71,
    73, 79, 83, 89, 97, 101, 103, 107, 109, 113,
    127, 131, 137, 139, 149, 151, 157, 163, 167, 173,
    179, 181, 191, 193, 197, 199,
)

# below this bound, surviving trial division by SMALL_PRIMES proves primality
EXACT_LIMIT = SMALL_PRIMES[-1] ** 2


class SieveVerdict(enum.Enum):
    EXACT_MATCH = "exact-match"
    DIVISIBLE = "divisible"
    NEITHER = "neither"


def quick_reject(candidate: BigUint) -> SieveVerdict:
    verdict, _p = quick_reject_with_prime(candidate)
    return verdict


def quick_reject_with_prime(candidate: BigUint) -> Tuple[SieveVerdict, Optional[int]]:
    """Like quick_reject, also naming the small prime that decided it."""
    tiny = candidate.bit_length() <= 8
    for p in SMALL_PRIMES:
        if tiny and int(candidate) == p:
            return SieveVerdict.EXACT_MATCH, p
        if mod_small(candidate, p) == 0:
            return SieveVerdict.DIVISIBLE, p
    return SieveVerdict.NEITHER, None


def sieve_decides(candidate: BigUint,
                  verdict: Optional[SieveVerdict] = None) -> Optional[bool]:
    """True/False when trial division settles primality, None otherwise.

    A verdict already computed by quick_reject can be passed in to skip the
    second round of trial division.
    """
    if candidate.bit_length() <= 1:
        return False
    if verdict is None:
        verdict = quick_reject(candidate)
    if verdict is SieveVerdict.EXACT_MATCH:
        return True
    if verdict is SieveVerdict.DIVISIBLE:
        return False
    if candidate.bit_length() <= EXACT_LIMIT.bit_length() and int(candidate) < EXACT_LIMIT:
        return True
    return None

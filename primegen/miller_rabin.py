# primegen/miller_rabin.py
# Miller–Rabin on fixed-width BigUint values.
# - witness_passes(): one strong round for base a
# - is_probable_prime(): sieve first, then `rounds` independent random bases
# - check_candidate(): verbose one-shot check reporting every base
#
# A composite survives one random round with probability <= 1/4, so all
# rounds passing leaves an error probability <= 4^-rounds.

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .biguint import BigUint, compare, shift_right_1
from .candidates import make_rng, random_in_range
from .modular import mod_exp, mod_multiply, reduce, sub_small
from .sieve import SieveVerdict, quick_reject_with_prime, sieve_decides

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10


@dataclass(frozen=True)
class WitnessRound:
    index: int
    base: BigUint
    passed: bool

    def as_dict(self) -> dict:
        return {"index": self.index, "base": self.base.hex(), "passed": self.passed}


def error_bound(rounds: int) -> float:
    return 4.0 ** -rounds


def reduce_witness(a: BigUint, n: BigUint) -> BigUint:
    """a mod n as a new value; `a` itself is left alone."""
    if a.limb_count != n.limb_count or compare(a, n) >= 0:
        return reduce(a, n)
    return a


def decompose(n: BigUint) -> Tuple[BigUint, int]:
    """n - 1 = d * 2^s with d odd."""
    d = sub_small(n, 1)
    s = 0
    while d.is_even() and not d.is_zero():
        d = shift_right_1(d)
        s += 1
    return d, s


def witness_passes(n: BigUint, a: BigUint) -> bool:
    """One strong round for base a (n odd, n >= 3). False means n is composite."""
    assert n.is_odd() and n.bit_length() >= 2, "witness test needs an odd n >= 3"
    a = reduce_witness(a, n)
    if a.is_zero():
        return True
    n_minus_1 = sub_small(n, 1)
    d, s = decompose(n)
    x = mod_exp(a, d, n)
    if x.is_one() or x == n_minus_1:
        return True
    for _ in range(s - 1):
        x = mod_multiply(x, x, n)
        if x == n_minus_1:
            return True
    return False


def is_probable_prime(n: BigUint, rounds: int = DEFAULT_ROUNDS,
                      rng: Optional[random.Random] = None,
                      report: Optional[List[WitnessRound]] = None,
                      verdict: Optional[SieveVerdict] = None) -> bool:
    """Trial division by the small primes, then `rounds` random bases.

    The first failing base proves n composite and ends the test. When
    `report` is given, one WitnessRound is appended per base drawn. A
    `verdict` from an earlier quick_reject(n) replaces the trial division.
    """
    decided = sieve_decides(n, verdict)
    if decided is not None:
        return decided
    if rng is None:
        rng = make_rng()
    for index in range(1, rounds + 1):
        a = random_in_range(n, rng)
        passed = witness_passes(n, a)
        logger.debug("base %2d: %s -> %s", index, a.hex(), "probably prime" if passed else "composite")
        if report is not None:
            report.append(WitnessRound(index, a, passed))
        if not passed:
            return False
    return True


# ---------- verbose one-shot check ----------

PRIME_VERDICTS = ("small-prime", "prime", "probably-prime")


@dataclass
class PrimalityReport:
    value: BigUint
    verdict: str
    small_prime: Optional[int] = None
    rounds: List[WitnessRound] = field(default_factory=list)

    @property
    def is_prime(self) -> bool:
        return self.verdict in PRIME_VERDICTS

    def as_dict(self) -> dict:
        return {
            "n": self.value.hex(),
            "verdict": self.verdict,
            "is_prime": self.is_prime,
            "small_prime": self.small_prime,
            "rounds": [r.as_dict() for r in self.rounds],
        }


def check_candidate(n: BigUint, rounds: int = DEFAULT_ROUNDS,
                    rng: Optional[random.Random] = None) -> PrimalityReport:
    """Test one value and keep every base and its verdict.

    Unlike is_probable_prime, all rounds run even after a failing base.
    """
    if n.bit_length() <= 1:
        return PrimalityReport(n, "not-prime")
    verdict, p = quick_reject_with_prime(n)
    if verdict is SieveVerdict.EXACT_MATCH:
        return PrimalityReport(n, "small-prime", small_prime=p)
    if verdict is SieveVerdict.DIVISIBLE:
        return PrimalityReport(n, "divisible", small_prime=p)
    if sieve_decides(n, verdict):
        return PrimalityReport(n, "prime")

    if rng is None:
        rng = make_rng()
    report = PrimalityReport(n, "probably-prime")
    for index in range(1, rounds + 1):
        a = random_in_range(n, rng)
        passed = witness_passes(n, a)
        report.rounds.append(WitnessRound(index, a, passed))
        if not passed:
            report.verdict = "composite"
    return report

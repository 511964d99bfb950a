# primegen/search.py
# Random prime search: candidate -> small-prime sieve -> Miller–Rabin, retried
# until a candidate is accepted.
#
# Budgets (attempts / seconds) are checked between candidates only; an
# in-flight Miller–Rabin test is never interrupted. What happens when a budget
# runs out is SearchPolicy.on_budget:
#   "continue"  the budget is advisory: warn once and keep searching
#   "fail"      stop and return a result with exhausted=True

from __future__ import annotations
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .biguint import BigUint, Width
from .candidates import make_rng, random_odd
from .errors import BitLengthError
from .miller_rabin import DEFAULT_ROUNDS, is_probable_prime
from .sieve import SieveVerdict, quick_reject

logger = logging.getLogger(__name__)

BUDGET_MODES = ("continue", "fail")


@dataclass
class SearchPolicy:
    max_attempts: Optional[int] = None
    max_duration: Optional[float] = None     # seconds
    reseed_every: Optional[int] = 1000       # attempts between reseeds
    reseed_interval: Optional[float] = None  # seconds between reseeds
    on_budget: str = "continue"
    progress_every: int = 100

    def __post_init__(self):
        if self.on_budget not in BUDGET_MODES:
            raise ValueError(f"on_budget must be one of {BUDGET_MODES}")

    @classmethod
    def legacy_native(cls) -> "SearchPolicy":
        """30-bit generator: no limit, reseed once a minute has passed."""
        return cls(reseed_every=None, reseed_interval=60.0)

    @classmethod
    def legacy_wide(cls) -> "SearchPolicy":
        """1024-bit generator: advisory 2 minute limit, reseed every 1000 attempts."""
        return cls(max_duration=120.0, reseed_every=1000)

    def budget_exceeded(self, attempts: int, elapsed: float) -> bool:
        if self.max_attempts is not None and attempts >= self.max_attempts:
            return True
        if self.max_duration is not None and elapsed >= self.max_duration:
            return True
        return False


@dataclass
class SearchResult:
    prime: Optional[BigUint]
    bits: int
    attempts: int
    elapsed: float
    rounds: int
    reseeds: int = 0
    exhausted: bool = False

    @property
    def found(self) -> bool:
        return self.prime is not None

    @property
    def hex(self) -> Optional[str]:
        return self.prime.hex() if self.prime is not None else None

    def as_dict(self) -> dict:
        return {
            "status": "ok" if self.found else "exhausted",
            "prime": self.hex,
            "bits": self.bits,
            "attempts": self.attempts,
            "elapsed_ms": int(self.elapsed * 1000),
            "rounds": self.rounds,
            "reseeds": self.reseeds,
        }


def _reseed(rng: random.Random, base_seed: int, attempts: int):
    rng.seed(base_seed + attempts)


def search_prime(bits: int,
                 rounds: int = DEFAULT_ROUNDS,
                 rng: Optional[random.Random] = None,
                 seed: Optional[int] = None,
                 policy: Optional[SearchPolicy] = None,
                 width: Optional[Width] = None,
                 on_progress: Optional[Callable[[int, float], None]] = None,
                 clock: Callable[[], float] = time.monotonic) -> SearchResult:
    """Search for a probable prime of exactly `bits` bits.

    Pass either a generator (`rng`) or a `seed`; with neither, the generator is
    seeded from the clock. Same seed and parameters give the same prime and
    attempt count, as long as no wall-clock reseed interval is set.
    """
    if bits < 2:
        raise BitLengthError(f"bit length must be >= 2 (got {bits})")
    if rounds < 1:
        raise ValueError("rounds must be >= 1")
    if width is None:
        width = Width.for_bits(bits)
    if bits > width.bits:
        raise BitLengthError(f"{bits} bits do not fit in a {width.bits}-bit width")
    if policy is None:
        policy = SearchPolicy()
    # reseeds derive from one base seed, so a seeded search or a seeded
    # generator stays reproducible; with neither, the base is the clock
    if seed is not None:
        base_seed = seed
    elif rng is not None:
        base_seed = rng.getrandbits(64)
    else:
        base_seed = time.time_ns()
    if rng is None:
        rng = make_rng(base_seed)

    start = clock()
    last_reseed = start
    attempts = 0
    reseeds = 0
    warned = False
    logger.info("searching for a %d-bit prime (%d rounds, %dx%d-bit limbs)",
                bits, rounds, width.limb_count, width.limb_bits)

    while True:
        attempts += 1
        candidate = random_odd(bits, rng, width)
        verdict = quick_reject(candidate)
        if verdict is not SieveVerdict.DIVISIBLE \
                and is_probable_prime(candidate, rounds, rng, verdict=verdict):
            elapsed = clock() - start
            logger.info("found probable %d-bit prime after %d attempts in %.1f seconds",
                        bits, attempts, elapsed)
            return SearchResult(candidate, bits, attempts, elapsed, rounds, reseeds)

        now = clock()
        elapsed = now - start
        if policy.progress_every and attempts % policy.progress_every == 0:
            logger.info("attempts: %d, time: %.1f seconds", attempts, elapsed)
            if on_progress is not None:
                on_progress(attempts, elapsed)

        if policy.budget_exceeded(attempts, elapsed):
            if policy.on_budget == "fail":
                logger.warning("search budget exhausted after %d attempts (%.1f s)", attempts, elapsed)
                return SearchResult(None, bits, attempts, elapsed, rounds, reseeds, exhausted=True)
            if not warned:
                logger.warning("search budget reached after %d attempts, continuing", attempts)
                warned = True

        due = policy.reseed_every and attempts % policy.reseed_every == 0
        if not due and policy.reseed_interval is not None:
            due = now - last_reseed >= policy.reseed_interval
        if due:
            _reseed(rng, base_seed, attempts)
            reseeds += 1
            last_reseed = now
            logger.info("reseeded generator after %d attempts", attempts)

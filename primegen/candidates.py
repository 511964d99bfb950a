# primegen/candidates.py
# Random candidates and Miller-Rabin witnesses.
#
# Randomness comes from an explicit random.Random instance (Mersenne Twister).
# It is NOT cryptographically secure: primes produced here must not be used
# as secret key material.

from __future__ import annotations
import random
from typing import Optional

from .biguint import BigUint, Width
from .errors import BitLengthError
from .modular import add_small, reduce, small, sub_small


def make_rng(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)


def random_limbs(width: Width, rng: random.Random) -> BigUint:
    """Uniform random bits in every limb."""
    return BigUint([rng.getrandbits(width.limb_bits) for _ in range(width.limb_count)],
                   width.limb_bits)


def random_odd(bit_length: int, rng: random.Random, width: Optional[Width] = None) -> BigUint:
    """Random odd value of exactly `bit_length` bits.

    Bit bit_length-1 and bit 0 are forced to 1, bits above are cleared; there
    is no rejection step.
    """
    if bit_length < 2:
        raise BitLengthError(f"bit length must be >= 2 (got {bit_length})")
    if width is None:
        width = Width.for_bits(bit_length)
    if bit_length > width.bits:
        raise BitLengthError(f"{bit_length} bits do not fit in a {width.bits}-bit width")

    limbs = list(random_limbs(width, rng).limbs)
    top, offset = divmod(bit_length - 1, width.limb_bits)
    limbs[top] &= (1 << (offset + 1)) - 1
    limbs[top] |= 1 << offset
    for i in range(top + 1, width.limb_count):
        limbs[i] = 0
    limbs[0] |= 1
    return BigUint(limbs, width.limb_bits)


def random_in_range(n: BigUint, rng: random.Random) -> BigUint:
    """Random witness in [2, n-2], i.e. (r mod (n-3)) + 2."""
    if n.bit_length() <= 3 and int(n) <= 4:
        return small(2, n.width)
    r = random_limbs(n.width, rng)
    return add_small(reduce(r, sub_small(n, 3)), 2)

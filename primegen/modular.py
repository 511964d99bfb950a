# primegen/modular.py
# Modular arithmetic on fixed-width BigUint values.
# - reduce(): align-shift-subtract (binary long division, quotient discarded)
# - mod_multiply(): full double-width product, then reduce
# - mod_exp(): square-and-multiply
# Single-limb values take the word path: shift-and-add multiplication keeps
# every partial sum below 2n, so nothing overflows a machine word pair.

from __future__ import annotations

from .biguint import (
    BigUint,
    Width,
    add,
    compare,
    multiply,
    narrow,
    shift_left_1,
    shift_right_1,
    sub,
    widen,
)
from .errors import WidthMismatchError

# ---------- word path (limb_count == 1) ----------

def mulmod_word(a: int, b: int, n: int) -> int:
    """(a * b) % n by shift-and-add."""
    res = 0
    a %= n
    while b:
        if b & 1:
            res += a
            if res >= n:
                res -= n
        a <<= 1
        if a >= n:
            a -= n
        b >>= 1
    return res % n


def powmod_word(base: int, exp: int, n: int) -> int:
    res = 1 % n
    base %= n
    while exp:
        if exp & 1:
            res = mulmod_word(res, base, n)
        base = mulmod_word(base, base, n)
        exp >>= 1
    return res


# ---------- reducer ----------

def reduce(x: BigUint, n: BigUint) -> BigUint:
    """x mod n for any x at least as wide as n; result has n's width.

    n is zero-extended to x's width and shifted left until it is >= x (or its
    top bit is set), then walked back down one bit at a time, subtracting it
    from the remainder whenever the remainder is still >= it.
    """
    if x.limb_bits != n.limb_bits or x.limb_count < n.limb_count:
        raise WidthMismatchError("reduce needs x at least as wide as n, same limb size")
    assert not n.is_zero(), "modulus must be nonzero"

    rem = x
    m = widen(n, x.limb_count)
    top = x.width.bits - 1
    shift = 0
    while compare(m, rem) < 0 and not m.test_bit(top):
        m = shift_left_1(m)
        shift += 1

    while shift >= 0:
        if compare(rem, m) >= 0:
            rem = sub(rem, m)
        m = shift_right_1(m)
        shift -= 1

    return narrow(rem, n.limb_count)


def mod_multiply(a: BigUint, b: BigUint, n: BigUint) -> BigUint:
    """(a * b) mod n, reducing the full double-width product."""
    if n.limb_count == 1:
        value = mulmod_word(int(a), int(b), int(n))
        return BigUint._raw((value,), n.width)
    return reduce(multiply(a, b), n)


def mod_exp(base: BigUint, exponent: BigUint, modulus: BigUint) -> BigUint:
    """base^exponent mod modulus; base and exponent are never modified."""
    if modulus.limb_count == 1:
        value = powmod_word(int(base), int(exponent), int(modulus))
        return BigUint._raw((value,), modulus.width)

    result = reduce(one(modulus.width), modulus)
    b = base
    e = exponent
    while not e.is_zero():
        if e.is_odd():
            result = mod_multiply(result, b, modulus)
        b = mod_multiply(b, b, modulus)
        e = shift_right_1(e)
    return result


# ---------- small helpers ----------

def small(value: int, width: Width) -> BigUint:
    return BigUint.from_int(value, width)


def one(width: Width) -> BigUint:
    return small(1, width)


def add_small(a: BigUint, value: int) -> BigUint:
    """a + value, truncated to a's width."""
    total, _carry = add(a, small(value, a.width))
    return total


def sub_small(a: BigUint, value: int) -> BigUint:
    return sub(a, small(value, a.width))

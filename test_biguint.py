import random
import pytest

from primegen.biguint import (
    BigUint, Width, add, sub, compare, shift_left_1, shift_right_1, multiply,
    low_half, widen, narrow, mod_small, to_hex, from_hex,
)
from primegen.errors import HexFormatError, WidthMismatchError, WidthOverflowError

# 8-bit limbs so carries and borrows cross limb boundaries all the time
W = Width(4, 8)


def big(v, w=W):
    return BigUint.from_int(v, w)


def test_limbs_are_least_significant_first():
    x = big(0x12345678)
    assert x.limbs == (0x78, 0x56, 0x34, 0x12)
    assert int(x) == 0x12345678
    assert x.limb_count == 4 and x.limb_bits == 8


def test_from_int_rejects_values_wider_than_width():
    with pytest.raises(WidthOverflowError):
        big(1 << 32)
    with pytest.raises(WidthOverflowError):
        big(-1)
    with pytest.raises(WidthOverflowError):
        BigUint([256], 8)


def test_values_are_immutable():
    x = big(5)
    with pytest.raises(AttributeError):
        x.limbs = (1, 2, 3, 4)


def test_add_propagates_carry_and_reports_overflow():
    s, carry = add(big(0x00ff00ff), big(0x00010001))
    assert int(s) == 0x01000100 and carry == 0
    s, carry = add(big(0xffffffff), big(1))
    assert int(s) == 0 and carry == 1


def test_sub_borrows_across_limbs():
    assert int(sub(big(0x01000000), big(1))) == 0x00ffffff
    assert int(sub(big(0x12345678), big(0x12345678))) == 0


def test_compare_from_most_significant_limb():
    assert compare(big(0x01000000), big(0x00ffffff)) == 1
    assert compare(big(0x00ffffff), big(0x01000000)) == -1
    assert compare(big(77), big(77)) == 0
    assert big(3) < big(4) <= big(4) < big(0x100)
    assert big(9) == big(9) and big(9) != big(10)


def test_mixed_shapes_are_rejected():
    with pytest.raises(WidthMismatchError):
        compare(big(1), BigUint.from_int(1, Width(2, 16)))
    with pytest.raises(WidthMismatchError):
        add(big(1), BigUint.from_int(1, Width(5, 8)))


def test_shifts_carry_across_limbs():
    assert int(shift_left_1(big(0x00800000))) == 0x01000000
    assert int(shift_left_1(big(0x80000001))) == 2  # top bit falls off
    assert int(shift_right_1(big(0x01000001))) == 0x00800000
    assert int(shift_right_1(big(1))) == 0


def test_multiply_keeps_the_full_double_width_product():
    rng = random.Random(7)
    for _ in range(200):
        a, b = rng.getrandbits(32), rng.getrandbits(32)
        p = multiply(big(a), big(b))
        assert p.limb_count == 8
        assert int(p) == a * b
    assert int(multiply(big(0xffffffff), big(0xffffffff))) == 0xffffffff ** 2


def test_low_half_is_the_truncating_product():
    p = multiply(big(0x10000), big(0x10003))
    assert int(low_half(p)) == (0x10000 * 0x10003) & 0xffffffff


def test_widen_and_narrow():
    w = widen(big(5), 6)
    assert w.limb_count == 6 and int(w) == 5
    assert narrow(w, 4) == big(5)
    with pytest.raises(WidthOverflowError):
        narrow(big(0x01000000), 3)


def test_mod_small_matches_python():
    rng = random.Random(3)
    for _ in range(100):
        v = rng.getrandbits(32)
        for p in (2, 3, 7, 97, 199):
            assert mod_small(big(v), p) == v % p


def test_bit_length_and_bits():
    assert big(0).bit_length() == 0
    assert big(1).bit_length() == 1
    assert big(0x00010000).bit_length() == 17
    x = big(0b1010)
    assert x.test_bit(1) and x.test_bit(3) and not x.test_bit(0)
    assert not x.test_bit(99)


# ---------- hex ----------

def test_to_hex_pads_every_limb_after_the_first():
    x = BigUint([0x2, 0x0, 0xab, 0x0], 32)
    assert to_hex(x) == "ab" + "00000000" + "00000002"
    assert x.hex() == "0xab0000000000000002"


def test_to_hex_of_zero():
    assert to_hex(BigUint.zero(Width(8, 32))) == "0"


@pytest.mark.parametrize("text, canon", [
    ("0x1F", "1f"),
    ("  0X0000abc\n", "abc"),
    ("0", "0"),
    ("000", "0"),
    ("deadBEEF", "deadbeef"),
    ("0x1000000000000000000000001", "1000000000000000000000001"),
])
def test_hex_round_trip_is_canonical(text, canon):
    assert to_hex(from_hex(text, Width(4, 32))) == canon


def test_hex_round_trip_at_1024_bits():
    v = (1 << 1023) | 0x1234567
    w = Width(32, 32)
    x = from_hex(hex(v), w)
    assert int(x) == v
    assert to_hex(x) == hex(v)[2:]


@pytest.mark.parametrize("text", ["", "0x", "xyz", "12g4", "-5"])
def test_from_hex_rejects_garbage(text):
    with pytest.raises(HexFormatError):
        from_hex(text, W)


def test_from_hex_rejects_values_wider_than_width():
    assert int(from_hex("ffffffff", Width(1, 32))) == 0xffffffff
    with pytest.raises(WidthOverflowError):
        from_hex("100000000", Width(1, 32))

# primegen/biguint.py
# Fixed-width unsigned integers stored as limbs (least significant first).
# - add / sub / compare / shift by one bit
# - schoolbook multiply into a double-width product
# - canonical hex encode / decode
#
# Width never changes: overflow wraps modulo 2^(limb_count * limb_bits).

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Tuple

from .errors import HexFormatError, WidthMismatchError, WidthOverflowError

LIMB_SIZES = (8, 16, 32, 64)
_HEX_DIGITS = frozenset("0123456789abcdef")


@dataclass(frozen=True)
class Width:
    limb_count: int
    limb_bits: int = 32

    def __post_init__(self):
        if self.limb_count < 1:
            raise ValueError("limb_count must be >= 1")
        if self.limb_bits not in LIMB_SIZES:
            raise ValueError(f"limb_bits must be one of {LIMB_SIZES}")

    @property
    def bits(self) -> int:
        return self.limb_count * self.limb_bits

    @property
    def mask(self) -> int:
        return (1 << self.limb_bits) - 1

    def doubled(self) -> "Width":
        return Width(self.limb_count * 2, self.limb_bits)

    @classmethod
    def for_bits(cls, bits: int, limb_bits: int = 32) -> "Width":
        """Smallest width with `limb_bits` limbs that holds `bits` bits."""
        if bits < 1:
            raise ValueError("bits must be >= 1")
        return cls(-(-bits // limb_bits), limb_bits)

    @classmethod
    def native(cls) -> "Width":
        """One 64-bit machine word."""
        return cls(1, 64)


class BigUint:
    """Nonnegative integer modulo 2^(limb_count * limb_bits).

    Instances are immutable; every operation returns a new value.
    """

    __slots__ = ("limbs", "width")

    def __init__(self, limbs: Iterable[int], limb_bits: int = 32):
        limbs = tuple(int(x) for x in limbs)
        width = Width(len(limbs), limb_bits)
        for x in limbs:
            if x < 0 or x > width.mask:
                raise WidthOverflowError(f"limb {x:#x} does not fit in {limb_bits} bits")
        object.__setattr__(self, "limbs", limbs)
        object.__setattr__(self, "width", width)

    def __setattr__(self, name, value):
        raise AttributeError("BigUint is immutable")

    # ---------- constructors ----------

    @classmethod
    def _raw(cls, limbs, width: Width) -> "BigUint":
        # limbs already range-checked by the arithmetic that produced them
        self = object.__new__(cls)
        object.__setattr__(self, "limbs", tuple(limbs))
        object.__setattr__(self, "width", width)
        return self

    @classmethod
    def zero(cls, width: Width) -> "BigUint":
        return cls((0,) * width.limb_count, width.limb_bits)

    @classmethod
    def from_int(cls, value: int, width: Width) -> "BigUint":
        if value < 0:
            raise WidthOverflowError("negative values are not representable")
        if value.bit_length() > width.bits:
            raise WidthOverflowError(f"{value.bit_length()}-bit value does not fit in {width.bits} bits")
        limbs = []
        for _ in range(width.limb_count):
            limbs.append(value & width.mask)
            value >>= width.limb_bits
        return cls(limbs, width.limb_bits)

    @classmethod
    def from_hex(cls, text: str, width: Width) -> "BigUint":
        return from_hex(text, width)

    # ---------- accessors ----------

    @property
    def limb_bits(self) -> int:
        return self.width.limb_bits

    @property
    def limb_count(self) -> int:
        return self.width.limb_count

    def is_zero(self) -> bool:
        return not any(self.limbs)

    def is_one(self) -> bool:
        return self.limbs[0] == 1 and not any(self.limbs[1:])

    def is_even(self) -> bool:
        return (self.limbs[0] & 1) == 0

    def is_odd(self) -> bool:
        return (self.limbs[0] & 1) == 1

    def bit_length(self) -> int:
        for i in range(self.limb_count - 1, -1, -1):
            if self.limbs[i]:
                return i * self.limb_bits + self.limbs[i].bit_length()
        return 0

    def test_bit(self, index: int) -> bool:
        i, offset = divmod(index, self.limb_bits)
        if i >= self.limb_count:
            return False
        return bool((self.limbs[i] >> offset) & 1)

    # ---------- python protocol ----------

    def __int__(self) -> int:
        value = 0
        for x in reversed(self.limbs):
            value = (value << self.limb_bits) | x
        return value

    __index__ = __int__

    def __eq__(self, other):
        if not isinstance(other, BigUint):
            return NotImplemented
        return compare(self, other) == 0

    def __lt__(self, other):
        return compare(self, other) < 0

    def __le__(self, other):
        return compare(self, other) <= 0

    def __gt__(self, other):
        return compare(self, other) > 0

    def __ge__(self, other):
        return compare(self, other) >= 0

    def __hash__(self):
        return hash((self.limbs, self.limb_bits))

    def __repr__(self):
        return f"BigUint(0x{to_hex(self)}, limbs={self.limb_count}x{self.limb_bits})"

    def hex(self) -> str:
        return "0x" + to_hex(self)


# ---------- arithmetic unit ----------

def _check_shape(a: BigUint, b: BigUint):
    if a.width != b.width:
        raise WidthMismatchError(
            f"operands differ in shape: {a.limb_count}x{a.limb_bits} vs {b.limb_count}x{b.limb_bits}")


def compare(a: BigUint, b: BigUint) -> int:
    """1 if a > b, 0 if equal, -1 if a < b (most significant limb first)."""
    _check_shape(a, b)
    for i in range(a.limb_count - 1, -1, -1):
        x, y = a.limbs[i], b.limbs[i]
        if x > y:
            return 1
        if x < y:
            return -1
    return 0


def add(a: BigUint, b: BigUint) -> Tuple[BigUint, int]:
    """Return (a + b truncated to width, carry out of the top limb)."""
    _check_shape(a, b)
    bits, mask = a.limb_bits, a.width.mask
    out = []
    carry = 0
    for x, y in zip(a.limbs, b.limbs):
        s = x + y + carry
        out.append(s & mask)
        carry = s >> bits
    return BigUint._raw(out, a.width), carry


def sub(a: BigUint, b: BigUint) -> BigUint:
    """a - b. Caller guarantees a >= b; otherwise the result wraps."""
    _check_shape(a, b)
    assert compare(a, b) >= 0, "subtraction underflow"
    base = 1 << a.limb_bits
    out = []
    borrow = 0
    for x, y in zip(a.limbs, b.limbs):
        d = x - y - borrow
        if d < 0:
            d += base
            borrow = 1
        else:
            borrow = 0
        out.append(d)
    return BigUint._raw(out, a.width)


def shift_left_1(a: BigUint) -> BigUint:
    bits, mask = a.limb_bits, a.width.mask
    out = []
    carry = 0
    for x in a.limbs:
        out.append(((x << 1) | carry) & mask)
        carry = x >> (bits - 1)
    return BigUint._raw(out, a.width)


def shift_right_1(a: BigUint) -> BigUint:
    bits = a.limb_bits
    out = [0] * a.limb_count
    carry = 0
    for i in range(a.limb_count - 1, -1, -1):
        x = a.limbs[i]
        out[i] = (x >> 1) | (carry << (bits - 1))
        carry = x & 1
    return BigUint._raw(out, a.width)


def multiply(a: BigUint, b: BigUint) -> BigUint:
    """Full product with 2 * limb_count limbs; nothing is truncated."""
    _check_shape(a, b)
    n, bits, mask = a.limb_count, a.limb_bits, a.width.mask
    acc = [0] * (2 * n)
    for i, x in enumerate(a.limbs):
        if not x:
            continue
        carry = 0
        for j, y in enumerate(b.limbs):
            t = x * y + acc[i + j] + carry
            acc[i + j] = t & mask
            carry = t >> bits
        acc[i + n] = carry
    return BigUint._raw(acc, a.width.doubled())


def low_half(x: BigUint) -> BigUint:
    """Keep the low half of a double-width value (truncating multiply)."""
    if x.limb_count % 2:
        raise WidthMismatchError("low_half needs an even limb count")
    return BigUint._raw(x.limbs[: x.limb_count // 2], Width(x.limb_count // 2, x.limb_bits))


def widen(x: BigUint, limb_count: int) -> BigUint:
    """Zero-extend to `limb_count` limbs."""
    if limb_count < x.limb_count:
        raise WidthMismatchError("widen cannot shrink a value")
    return BigUint._raw(x.limbs + (0,) * (limb_count - x.limb_count), Width(limb_count, x.limb_bits))


def narrow(x: BigUint, limb_count: int) -> BigUint:
    """Drop high limbs that are known to be zero."""
    if any(x.limbs[limb_count:]):
        raise WidthOverflowError("value does not fit in the narrower width")
    return BigUint._raw(x.limbs[:limb_count], Width(limb_count, x.limb_bits))


def mod_small(a: BigUint, p: int) -> int:
    """a mod p for a small positive p (Horner over the limbs)."""
    rem = 0
    for x in reversed(a.limbs):
        rem = ((rem << a.limb_bits) | x) % p
    return rem


# ---------- hex codec ----------

def to_hex(a: BigUint) -> str:
    """Big-endian hex without prefix.

    The first nonzero limb is printed without padding, every later limb is
    zero padded to its full width; zero encodes as "0".
    """
    digits = a.limb_bits // 4
    parts = []
    for x in reversed(a.limbs):
        if not parts:
            if x:
                parts.append(f"{x:x}")
        else:
            parts.append(f"{x:0{digits}x}")
    return "".join(parts) or "0"


def canonical_hex(text: str) -> str:
    """Lowercase, prefix-free, no leading zeros."""
    s = text.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if not s or not set(s) <= _HEX_DIGITS:
        raise HexFormatError(f"not a hex number: {text!r}")
    return s.lstrip("0") or "0"


def from_hex(text: str, width: Width) -> BigUint:
    s = canonical_hex(text)
    top_bits = (len(s) - 1) * 4 + int(s[0], 16).bit_length()
    if top_bits > width.bits:
        raise WidthOverflowError(f"{top_bits}-bit value does not fit in {width.bits} bits")
    digits = width.limb_bits // 4
    limbs = []
    end = len(s)
    while end > 0:
        start = max(0, end - digits)
        limbs.append(int(s[start:end], 16))
        end = start
    limbs += [0] * (width.limb_count - len(limbs))
    return BigUint(limbs, width.limb_bits)

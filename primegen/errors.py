# primegen/errors.py
# Exceptions raised at the primegen boundary; the concrete ones are also ValueError.

class PrimegenError(Exception):
    """Base class for errors raised at the primegen boundary."""


class BitLengthError(PrimegenError, ValueError):
    """Requested bit length is below 2 or wider than the integer width."""


class WidthOverflowError(PrimegenError, ValueError):
    """Value does not fit in the fixed width."""


class WidthMismatchError(PrimegenError, ValueError):
    """Operands have a different limb count or limb size."""


class HexFormatError(PrimegenError, ValueError):
    """Hex input is empty or contains non-hex characters."""

from .biguint import BigUint, Width, from_hex, to_hex
from .errors import (
    BitLengthError,
    HexFormatError,
    PrimegenError,
    WidthMismatchError,
    WidthOverflowError,
)
from .miller_rabin import check_candidate, is_probable_prime, witness_passes
from .modular import mod_exp, mod_multiply, reduce
from .search import SearchPolicy, SearchResult, search_prime
from .sieve import SMALL_PRIMES, SieveVerdict, quick_reject

__all__ = [
    "BigUint", "Width", "from_hex", "to_hex",
    "PrimegenError", "BitLengthError", "HexFormatError", "WidthMismatchError", "WidthOverflowError",
    "check_candidate", "is_probable_prime", "witness_passes",
    "mod_exp", "mod_multiply", "reduce",
    "SearchPolicy", "SearchResult", "search_prime",
    "SMALL_PRIMES", "SieveVerdict", "quick_reject",
]

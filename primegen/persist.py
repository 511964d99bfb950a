# primegen/persist.py
# Prime files: one line, `0x<hex>` plus newline.

from __future__ import annotations
from pathlib import Path
from typing import Union

from .biguint import BigUint, Width, from_hex, to_hex


def write_prime_file(path: Union[str, Path], value: BigUint) -> Path:
    """Write `0x<hex>` plus newline, the format the generator has always saved."""
    path = Path(path)
    path.write_text(f"0x{to_hex(value)}\n")
    return path


def read_prime_file(path: Union[str, Path], width: Width) -> BigUint:
    return from_hex(Path(path).read_text(), width)

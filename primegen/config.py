# primegen/config.py
# Settings from the environment; CLI flags and request fields override them.

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from .biguint import Width


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


@dataclass
class Settings:
    bits: int = 30
    rounds: int = 10
    limb_bits: int = 32
    max_seconds: Optional[float] = None
    max_attempts: Optional[int] = None
    hard_limit: bool = False
    out: str = "prime.txt"
    max_sync_bits: int = 128
    sync_max_seconds: float = 10.0
    redis_url: str = "redis://localhost:6379/0"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            bits=_int_env("PRIMEGEN_BITS", 30),
            rounds=_int_env("PRIMEGEN_ROUNDS", 10),
            limb_bits=_int_env("PRIMEGEN_LIMB_BITS", 32),
            max_seconds=_float_env("PRIMEGEN_MAX_SECONDS", None),
            max_attempts=_int_env("PRIMEGEN_MAX_ATTEMPTS", None),
            hard_limit=bool(_int_env("PRIMEGEN_HARD_LIMIT", 0)),
            out=os.getenv("PRIMEGEN_OUT", "prime.txt"),
            max_sync_bits=_int_env("PRIMEGEN_MAX_SYNC_BITS", 128),
            sync_max_seconds=_float_env("PRIMEGEN_SYNC_MAX_SECONDS", 10.0),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            log_level=os.getenv("PRIMEGEN_LOG_LEVEL", "INFO").upper(),
        )

    def width_for(self, bits: int) -> Width:
        """Native word for anything that fits 64 bits, limbs otherwise."""
        if bits <= 64:
            return Width.native()
        return Width.for_bits(bits, self.limb_bits)

"""
editions.config — supply caps, pricing defaults and distribution policy.

Configuration precedence:
  1) Environment variables (EDITIONS_*)
  2) Hardcoded defaults below

Key env vars:
  - EDITIONS_MAX_SUPPLY         (int)   default: 10_000
  - EDITIONS_MAX_PUBLIC_MINT    (int)   default: 10
  - EDITIONS_MAX_PER_CALL       (int)   default: 255
  - EDITIONS_UNIT_PRICE         (int)   default: 20       (smallest currency unit)
  - EDITIONS_FIRST_TOKEN_ID     (int)   default: 1
  - EDITIONS_URI_SUFFIX         (str)   default: ".json"
  - EDITIONS_PLACEHOLDER_URI    (str)   default: "ipfs://placeholder/hidden.json"
  - EDITIONS_REMAINDER_POLICY   (str)   default: "first"   ("first" | "strict")

A contract copies its EditionConfig at construction; the caps it carries are
immutable for the life of that contract. Out-of-range integers are clamped,
unparsable values fall back to the default.

Usage:
    from editions.config import load_config
    CFG = load_config()
    if CFG.remainder_policy == REMAINDER_STRICT: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Dict

REMAINDER_FIRST = "first"
REMAINDER_STRICT = "strict"
REMAINDER_POLICIES = (REMAINDER_FIRST, REMAINDER_STRICT)

# Percentages are whole numbers of this denominator.
PERCENT_DENOMINATOR = 100


# ----------------------------- helpers ---------------------------------------


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw.replace("_", ""), 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip()


def _env_choice(name: str, default: str, choices: tuple) -> str:
    val = _env_str(name, default).lower()
    return val if val in choices else default


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class EditionConfig:
    max_supply: int = 10_000
    max_public_mint: int = 10
    max_per_call: int = 255
    unit_price: int = 20
    first_token_id: int = 1
    uri_suffix: str = ".json"
    placeholder_uri: str = "ipfs://placeholder/hidden.json"
    remainder_policy: str = REMAINDER_FIRST

    def __post_init__(self) -> None:
        for name in ("max_supply", "max_public_mint", "max_per_call", "unit_price"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or v <= 0:
                raise ValueError(f"{name} must be a positive int, got {v!r}")
        if not isinstance(self.first_token_id, int) or self.first_token_id < 0:
            raise ValueError("first_token_id must be a non-negative int")
        if self.remainder_policy not in REMAINDER_POLICIES:
            raise ValueError(f"unknown remainder policy {self.remainder_policy!r}")

    def with_overrides(self, **overrides: Any) -> "EditionConfig":
        return replace(self, **overrides)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "max_supply": self.max_supply,
            "max_public_mint": self.max_public_mint,
            "max_per_call": self.max_per_call,
            "unit_price": self.unit_price,
            "first_token_id": self.first_token_id,
            "uri_suffix": self.uri_suffix,
            "placeholder_uri": self.placeholder_uri,
            "remainder_policy": self.remainder_policy,
        }


@lru_cache(maxsize=1)
def load_config() -> EditionConfig:
    """
    Build and cache an EditionConfig from environment + defaults.
    """
    d = EditionConfig()
    return EditionConfig(
        max_supply=_env_int("EDITIONS_MAX_SUPPLY", d.max_supply, min_v=1, max_v=1 << 64),
        max_public_mint=_env_int("EDITIONS_MAX_PUBLIC_MINT", d.max_public_mint, min_v=1, max_v=1 << 32),
        max_per_call=_env_int("EDITIONS_MAX_PER_CALL", d.max_per_call, min_v=1, max_v=1 << 16),
        unit_price=_env_int("EDITIONS_UNIT_PRICE", d.unit_price, min_v=1, max_v=(1 << 256) - 1),
        first_token_id=_env_int("EDITIONS_FIRST_TOKEN_ID", d.first_token_id, min_v=0, max_v=1),
        uri_suffix=_env_str("EDITIONS_URI_SUFFIX", d.uri_suffix),
        placeholder_uri=_env_str("EDITIONS_PLACEHOLDER_URI", d.placeholder_uri),
        remainder_policy=_env_choice("EDITIONS_REMAINDER_POLICY", d.remainder_policy, REMAINDER_POLICIES),
    )


__all__ = [
    "EditionConfig",
    "load_config",
    "PERCENT_DENOMINATOR",
    "REMAINDER_FIRST",
    "REMAINDER_STRICT",
    "REMAINDER_POLICIES",
]

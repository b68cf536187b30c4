"""
editions.runtime.context — per-call environment passed to entry points.

A CallContext carries only pure data: who is calling and how much value is
attached. Addresses are raw bytes; the helpers below also accept hex strings
("0x"-prefixed or bare) and normalize them.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Union

from ..errors import ContextError

BytesLike = Union[bytes, bytearray, memoryview, str]

ADDRESS_LEN = 20


# ----------------------------- helpers ----------------------------- #


def to_bytes(value: BytesLike) -> bytes:
    """Normalize bytes-likes and hex strings to immutable bytes."""
    if isinstance(value, str):
        text = value.strip()
        if text[:2] in ("0x", "0X"):
            text = text[2:]
        try:
            return bytes.fromhex(text)
        except ValueError as exc:
            raise ContextError("malformed hex string", context={"value": value}) from exc
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ContextError("expected bytes or hex string", context={"py_type": type(value).__name__})


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    return "0x" + bytes(b).hex()


def to_address(value: BytesLike) -> bytes:
    addr = to_bytes(value)
    if not addr:
        raise ContextError("address must be non-empty")
    return addr


def derive_address(label: str) -> bytes:
    """
    Stable address for a human label (first 20 bytes of sha3-256).
    Simulations and tests use it for named accounts.
    """
    return hashlib.sha3_256(label.encode("utf-8")).digest()[:ADDRESS_LEN]


# ----------------------------- model ------------------------------- #


@dataclass(frozen=True)
class CallContext:
    """
    sender: calling address
    value:  attached value in the smallest currency unit (>= 0)
    """

    sender: bytes
    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "sender", to_address(self.sender))
        v: Any = self.value
        if not isinstance(v, int) or isinstance(v, bool) or v < 0:
            raise ContextError("call value must be a non-negative int", context={"value": repr(v)})

    def to_dict(self) -> Dict[str, Any]:
        return {"sender": to_hex(self.sender), "value": self.value}


__all__ = ["CallContext", "ADDRESS_LEN", "to_bytes", "to_hex", "to_address", "derive_address"]

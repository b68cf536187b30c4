# -*- coding: utf-8 -*-
"""
editions.stdlib.splitter
========================

Lockable percentage split registry and push-style distributor.

The registry maps recipient addresses to whole-number percentages that sum to
exactly 100. It is replaced wholesale by `configure` until `lock` is called;
after that it is immutable. Iteration order is configuration order and never
changes while the registry exists.

Distribution formula, for each recipient in order:

    share(recipient) = floor(amount * percentage / 100)

Floor division can leave a remainder (at most one unit per non-zero entry,
minus one) when `amount` is not a multiple of 100. The remainder policy
decides what happens to it:

- ``first``  : the remainder is added to the first recipient with a non-zero
               percentage, so the full amount is always paid out.
- ``strict`` : shares are paid as computed and any remainder makes the
               distribution fail with DistributionMismatch.

Either way, after paying every recipient the distributor requires
``distributed == amount``. A single failed transfer aborts the distribution;
the enclosing contract call is rolled back as a unit.

Events
------
- b"SplitsConfigured" {recipients: [bytes], percentages: [int]}
- b"SplitsLocked"     {sender: bytes}
- b"PaymentReleased"  {to: bytes, amount: int, percentage: int}

Errors
------
- SplitsLocked, LengthMismatch, InvalidSplitTotal, NoSplitsDefined,
  DistributionMismatch, TransferFailed (from the treasury)
- InvalidValue with codes SPLIT:ZERO_ADDR, SPLIT:BAD_PERCENT,
  SPLIT:DUP_RECIPIENT
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..config import PERCENT_DENOMINATOR, REMAINDER_FIRST, REMAINDER_STRICT
from ..errors import (ContextError, DistributionMismatch, InvalidSplitTotal,
                      InvalidValue, LengthMismatch, NoSplitsDefined, SplitsLocked)
from ..runtime.context import BytesLike, to_bytes, to_hex
from ..runtime.events import EventSink
from ..runtime.treasury import Treasury, check_amount

__all__ = [
    "SplitRegistry",
    "entries",
    "configure",
    "lock",
    "compute_shares",
    "distribute",
]


@dataclass
class SplitRegistry:
    recipients: List[bytes] = field(default_factory=list)
    percentages: List[int] = field(default_factory=list)
    locked: bool = False


# ---------- Views ----------


def entries(reg: SplitRegistry) -> List[Tuple[bytes, int]]:
    return list(zip(reg.recipients, reg.percentages))


def _recipient(value: BytesLike) -> bytes:
    """Bytes or hex string to a non-empty address."""
    try:
        addr = to_bytes(value)
    except ContextError as exc:
        raise InvalidValue(
            "recipient must be a non-empty address", code="SPLIT:ZERO_ADDR", context=exc.context
        ) from exc
    if not addr:
        raise InvalidValue("recipient must be a non-empty address", code="SPLIT:ZERO_ADDR")
    return addr


def _validate(recipients: Sequence[BytesLike], percentages: Sequence[int]) -> Tuple[List[bytes], List[int]]:
    rs: List[bytes] = []
    ps: List[int] = []
    seen = set()
    for raw, p in zip(recipients, percentages):
        b = _recipient(raw)
        if not isinstance(p, int) or isinstance(p, bool) or p < 0 or p > PERCENT_DENOMINATOR:
            raise InvalidValue(
                "percentage must be an int in 0..100",
                code="SPLIT:BAD_PERCENT",
                context={"recipient": to_hex(b), "percentage": repr(p)},
            )
        if b in seen:
            raise InvalidValue(
                "duplicate recipient", code="SPLIT:DUP_RECIPIENT", context={"recipient": to_hex(b)}
            )
        seen.add(b)
        rs.append(b)
        ps.append(p)
    return rs, ps


# ---------- Mutations ----------


def configure(
    reg: SplitRegistry,
    events: EventSink,
    recipients: Sequence[BytesLike],
    percentages: Sequence[int],
) -> None:
    """
    Replace the registry with `recipients`/`percentages`. Recipients may be
    bytes or hex strings. The registry is left untouched on any failure.
    """
    if reg.locked:
        raise SplitsLocked()
    if len(recipients) != len(percentages):
        raise LengthMismatch(context={"recipients": len(recipients), "percentages": len(percentages)})

    rs, ps = _validate(recipients, percentages)
    total = sum(ps)
    if total != PERCENT_DENOMINATOR:
        raise InvalidSplitTotal(context={"total": total})

    reg.recipients = rs
    reg.percentages = ps
    events.emit(b"SplitsConfigured", {"recipients": tuple(rs), "percentages": tuple(ps)})


def lock(reg: SplitRegistry, events: EventSink, caller: bytes) -> bool:
    """One-way; returns False if already locked."""
    if reg.locked:
        return False
    reg.locked = True
    events.emit(b"SplitsLocked", {"sender": caller})
    return True


# ---------- Distribution ----------


def compute_shares(reg: SplitRegistry, amount: int, policy: str = REMAINDER_FIRST) -> List[Tuple[bytes, int, int]]:
    """
    Return [(recipient, share, percentage)] for `amount` under `policy`.
    """
    check_amount(amount)
    out = [
        (r, (amount * p) // PERCENT_DENOMINATOR, p)
        for r, p in zip(reg.recipients, reg.percentages)
    ]
    remainder = amount - sum(share for _, share, _ in out)
    if remainder and policy != REMAINDER_STRICT:
        for i, (r, share, p) in enumerate(out):
            if p > 0:
                out[i] = (r, share + remainder, p)
                break
    return out


def distribute(
    reg: SplitRegistry,
    treasury: Treasury,
    events: EventSink,
    payer: bytes,
    amount: int,
    policy: str = REMAINDER_FIRST,
) -> int:
    """
    Push `amount` from `payer` to every recipient. Returns the amount paid.
    """
    if not reg.recipients:
        raise NoSplitsDefined()

    distributed = 0
    for recipient, share, pct in compute_shares(reg, amount, policy):
        treasury.transfer(payer, recipient, share)
        events.emit(b"PaymentReleased", {"to": recipient, "amount": share, "percentage": pct})
        distributed += share

    if distributed != amount:
        raise DistributionMismatch(
            context={"amount": amount, "distributed": distributed, "remainder": amount - distributed}
        )
    return distributed

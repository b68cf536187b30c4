# -*- coding: utf-8 -*-
"""
editions.stdlib.token
=====================

Sequential token-ownership ledger.

Ids are assigned consecutively starting at ``first_id``. A batch issue records
the owner once, at the first id of the batch; `owner_of` walks back to the
nearest recorded owner. Transfers split a run by recording the previous owner
on the following id when it was implicit.

Public API
----------
- issue(ledger, events, to, quantity) -> list[int]
- total_issued(ledger) -> int
- exists(ledger, token_id) -> bool
- owner_of(ledger, token_id) -> bytes
- balance_of(ledger, owner) -> int
- transfer(ledger, events, caller, to, token_id) -> None

Events
------
- b"Transfer" {"from": bytes (empty on issue), "to": bytes, "token_id": int}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..errors import InvalidValue, NonexistentToken, UnauthorizedCaller
from ..runtime.context import to_hex
from ..runtime.events import EventSink

ZERO_ADDR = b""

__all__ = [
    "TokenLedger",
    "issue",
    "total_issued",
    "exists",
    "owner_of",
    "balance_of",
    "transfer",
]


@dataclass
class TokenLedger:
    first_id: int = 1
    next_id: int = -1
    owners: Dict[int, bytes] = field(default_factory=dict)
    balances: Dict[bytes, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.next_id < self.first_id:
            self.next_id = self.first_id


def total_issued(ledger: TokenLedger) -> int:
    return ledger.next_id - ledger.first_id


def exists(ledger: TokenLedger, token_id: int) -> bool:
    return isinstance(token_id, int) and ledger.first_id <= token_id < ledger.next_id


def owner_of(ledger: TokenLedger, token_id: int) -> bytes:
    if not exists(ledger, token_id):
        raise NonexistentToken(context={"token_id": token_id})
    i = token_id
    while i not in ledger.owners:
        i -= 1
    return ledger.owners[i]


def balance_of(ledger: TokenLedger, owner: bytes) -> int:
    return ledger.balances.get(bytes(owner), 0)


def issue(ledger: TokenLedger, events: EventSink, to: bytes, quantity: int) -> List[int]:
    """
    Assign `quantity` new consecutive ids to `to`. Returns the new ids.
    Supply caps are the caller's responsibility.
    """
    if not to:
        raise InvalidValue("cannot issue to the empty address", code="TOKEN:ZERO_ADDR")
    if not isinstance(quantity, int) or quantity <= 0:
        raise InvalidValue("quantity must be a positive int", code="TOKEN:BAD_QUANTITY")

    start = ledger.next_id
    ledger.owners[start] = bytes(to)
    ledger.balances[bytes(to)] = ledger.balances.get(bytes(to), 0) + quantity
    ledger.next_id = start + quantity

    ids = list(range(start, start + quantity))
    for token_id in ids:
        events.emit(b"Transfer", {"from": ZERO_ADDR, "to": to, "token_id": token_id})
    return ids


def transfer(ledger: TokenLedger, events: EventSink, caller: bytes, to: bytes, token_id: int) -> None:
    """
    Holder-only transfer of a single token.
    """
    holder = owner_of(ledger, token_id)
    if holder != caller:
        raise UnauthorizedCaller(
            "caller does not hold the token",
            code="TOKEN:NOT_HOLDER",
            context={"caller": to_hex(caller), "token_id": token_id},
        )
    if not to:
        raise InvalidValue("cannot transfer to the empty address", code="TOKEN:ZERO_ADDR")

    nxt = token_id + 1
    if nxt < ledger.next_id and nxt not in ledger.owners:
        ledger.owners[nxt] = holder
    ledger.owners[token_id] = bytes(to)

    ledger.balances[holder] -= 1
    ledger.balances[bytes(to)] = ledger.balances.get(bytes(to), 0) + 1
    events.emit(b"Transfer", {"from": holder, "to": to, "token_id": token_id})

"""
editions.runtime.treasury — deterministic in-memory balance ledger.

The treasury holds the balance of every account the contract interacts with:
buyers, the contract itself and split recipients. It exposes:

- balance(addr) -> int
- credit(addr, amount) / debit(addr, amount)      # host/test helpers
- move(frm, to, amount)                           # attach call value (no hooks)
- transfer(frm, to, amount)                       # payout; runs the recipient hook
- register_sink(addr, sink)                       # install a PayableSink for addr
- bind(engine)                                    # claim the ledger for one contract
- snapshot() / restore(snap)                      # used by the call engine

Payable sinks
-------------
A recipient may register a PayableSink. After the recipient is credited its
``on_receive(sender, amount)`` hook runs; the hook may call back into the
contract. Returning ``False`` or raising rejects the payment and the transfer
fails with TransferFailed. The enclosing contract call is then rolled back as
a unit, so a rejected payment never leaves a partial payout behind.

Notes
-----
* Simulation-only ledger; amounts are u256-bounded Python ints.
* Zero-amount transfers are a no-op and do not invoke hooks.
* A treasury backs exactly one contract (`bind`). Rolling back a call
  restores the whole ledger, so a second contract sharing it would lose
  commits made from inside the first contract's payout hooks.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Protocol, runtime_checkable

from ..errors import InsufficientBalance, InvalidValue, LedgerError, TransferFailed
from .context import to_address, to_hex

log = logging.getLogger(__name__)

_U256_MAX = (1 << 256) - 1


@runtime_checkable
class PayableSink(Protocol):
    """Recipient-side hook invoked when an address receives a payout."""

    def on_receive(self, sender: bytes, amount: int) -> Optional[bool]: ...


# ------------------------------ Amount checks ------------------------------ #


def check_amount(amount: int) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise InvalidValue("amount must be int", context={"py_type": type(amount).__name__})
    if amount < 0:
        raise InvalidValue("amount must be non-negative", context={"amount": amount})
    if amount > _U256_MAX:
        raise InvalidValue("amount exceeds 256-bit limit")
    return amount


def _add_checked(a: int, b: int) -> int:
    c = a + b
    if c > _U256_MAX:
        raise InvalidValue("balance overflow")
    return c


# --------------------------------- Ledger ---------------------------------- #


class Treasury:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._balances: Dict[bytes, int] = {}
        self._sinks: Dict[bytes, PayableSink] = {}
        self._backs: Optional[object] = None

    # ---- views ----

    def balance(self, addr: bytes) -> int:
        with self._lock:
            return self._balances.get(to_address(addr), 0)

    def balances(self) -> Dict[bytes, int]:
        with self._lock:
            return {a: b for a, b in self._balances.items() if b}

    # ---- host helpers ----

    def credit(self, addr: bytes, amount: int) -> None:
        a = to_address(addr)
        check_amount(amount)
        with self._lock:
            self._balances[a] = _add_checked(self._balances.get(a, 0), amount)

    def debit(self, addr: bytes, amount: int) -> None:
        a = to_address(addr)
        check_amount(amount)
        with self._lock:
            cur = self._balances.get(a, 0)
            if amount > cur:
                raise InsufficientBalance(
                    context={"address": to_hex(a), "balance": cur, "required": amount},
                )
            self._balances[a] = cur - amount

    def bind(self, engine: object) -> None:
        """Attach the call engine this ledger belongs to; one per treasury."""
        with self._lock:
            if self._backs is not None and self._backs is not engine:
                raise InvalidValue("treasury already backs another contract", code="TREASURY:SHARED")
            self._backs = engine

    def register_sink(self, addr: bytes, sink: PayableSink) -> None:
        if not isinstance(sink, PayableSink):
            raise InvalidValue("sink must implement on_receive(sender, amount)")
        with self._lock:
            self._sinks[to_address(addr)] = sink

    def unregister_sink(self, addr: bytes) -> None:
        with self._lock:
            self._sinks.pop(to_address(addr), None)

    # ---- movements ----

    def move(self, frm: bytes, to: bytes, amount: int) -> None:
        """Debit `frm` and credit `to` without running any recipient hook."""
        if amount == 0:
            return
        with self._lock:
            self.debit(frm, amount)
            self.credit(to, amount)

    def transfer(self, frm: bytes, to: bytes, amount: int) -> None:
        """
        Pay `amount` from `frm` to `to`, then run the recipient's hook if any.
        Raises TransferFailed on insufficient funds or a rejecting recipient.
        """
        check_amount(amount)
        bto = to_address(to)
        bfrm = to_address(frm)
        if amount == 0:
            return
        with self._lock:
            try:
                self.debit(bfrm, amount)
            except InsufficientBalance as exc:
                raise TransferFailed(
                    "payer balance too low", code=InsufficientBalance.code, context=exc.context
                ) from exc
            self.credit(bto, amount)
            sink = self._sinks.get(bto)

        if sink is None:
            return
        try:
            accepted = sink.on_receive(bfrm, amount)
        except LedgerError as exc:
            log.warning("payment to %s rejected by hook: %s", to_hex(bto), exc.code)
            raise TransferFailed(
                "recipient hook raised", context={"to": to_hex(bto), "cause": exc.code}
            ) from exc
        except Exception as exc:
            log.warning("payment to %s rejected by hook: %r", to_hex(bto), exc)
            raise TransferFailed(
                "recipient hook raised", context={"to": to_hex(bto), "cause": type(exc).__name__}
            ) from exc
        if accepted is False:
            log.warning("payment to %s refused", to_hex(bto))
            raise TransferFailed("recipient refused payment", context={"to": to_hex(bto), "amount": amount})

    # ---- checkpoints ----

    def snapshot(self) -> Dict[bytes, int]:
        with self._lock:
            return dict(self._balances)

    def restore(self, snap: Dict[bytes, int]) -> None:
        with self._lock:
            self._balances.clear()
            self._balances.update(snap)


__all__ = ["Treasury", "PayableSink", "check_amount"]

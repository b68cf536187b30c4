"""
Edition Contract — capped paid minting with locked payment splits

A deterministic contract that:
1. Issues a capped series of sequential tokens against payment
2. Enforces a per-wallet public mint cap and a unit price
3. Pushes every received payment to fixed recipients by percentage
4. Lets the owner configure price, splits and metadata, then lock them

State (EditionState):
  - access:   owner capability
  - flags:    mint_paused, dev_mint_locked
  - price:    unit price in the smallest currency unit
  - splits:   recipient -> percentage registry (+ locked latch)
  - tokens:   sequential token-ownership ledger
  - minted:   per-wallet public mint counts
  - metadata: base / placeholder URI and reveal latch
  - guard:    reentrancy latch (never snapshotted)

Entry points (owner-only unless noted):
  - mint(quantity)                     [anyone, payable]
  - deposit()                          [anyone, payable]
  - transfer_token(to, token_id)       [token holder]
  - dev_mint(quantity)
  - lock_dev_mint()
  - set_price(price)
  - set_splits(recipients, percentages)
  - lock_splits()
  - set_paused(paused) / pause() / unpause()
  - withdraw()
  - set_base_uri(uri) / set_placeholder_uri(uri) / reveal()
  - transfer_ownership(new_owner)

Public mint checks, in order:
  MintingPaused -> SupplyExceeded -> InsufficientFunds -> WalletCapExceeded

Attached value is collected from the caller only after these checks pass.
Overpayment is accepted and not refunded: the full attached value is
distributed to the split recipients.

Events:
  - Minted(buyer, quantity, first_id, value)
  - DevMinted(to, quantity, first_id)
  - PriceChanged(previous, price)
  - Deposited(sender, amount)
  - Withdrawn(sender, amount)
  - plus stdlib events (Transfer, SplitsConfigured, PaymentReleased, ...)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import EditionConfig, load_config
from .errors import InsufficientFunds, InvalidValue, SupplyExceeded, WalletCapExceeded
from .runtime.context import CallContext, derive_address, to_address, to_hex
from .runtime.engine import CallEngine, entrypoint
from .runtime.events import EventSink
from .runtime.treasury import Treasury
from .stdlib import access, control, metadata, splitter, token

EVENT_MINTED = b"Minted"
EVENT_DEV_MINTED = b"DevMinted"
EVENT_PRICE_CHANGED = b"PriceChanged"
EVENT_DEPOSITED = b"Deposited"
EVENT_WITHDRAWN = b"Withdrawn"

_TRANSIENT = frozenset({"guard"})


# ============================================================================
# State
# ============================================================================


@dataclass
class EditionState:
    price: int
    access: access.AccessState = field(default_factory=access.AccessState)
    flags: control.PauseFlags = field(default_factory=control.PauseFlags)
    splits: splitter.SplitRegistry = field(default_factory=splitter.SplitRegistry)
    tokens: token.TokenLedger = field(default_factory=token.TokenLedger)
    minted: Dict[bytes, int] = field(default_factory=dict)
    metadata: metadata.MetadataState = field(default_factory=metadata.MetadataState)
    guard: control.ReentrancyGuard = field(default_factory=control.ReentrancyGuard, repr=False, compare=False)

    def snapshot(self) -> Dict[str, Any]:
        return {f.name: copy.deepcopy(getattr(self, f.name)) for f in fields(self) if f.name not in _TRANSIENT}

    def restore(self, snap: Dict[str, Any]) -> None:
        for name, value in snap.items():
            setattr(self, name, value)


# ============================================================================
# Contract
# ============================================================================


class Edition:
    def __init__(
        self,
        owner: Any,
        *,
        treasury: Optional[Treasury] = None,
        config: Optional[EditionConfig] = None,
        address: Any = None,
        base_uri: str = "",
    ) -> None:
        self.config = config or load_config()
        owner_addr = to_address(owner)
        self.address = to_address(address) if address is not None else derive_address("edition:" + to_hex(owner_addr))
        self.treasury = treasury or Treasury()
        self.events = EventSink()

        self.state = EditionState(
            price=self.config.unit_price,
            tokens=token.TokenLedger(first_id=self.config.first_token_id),
            metadata=metadata.MetadataState(
                base_uri=metadata.check_uri(base_uri) if base_uri else "",
                placeholder_uri=self.config.placeholder_uri,
            ),
        )
        access.init_owner(self.state.access, owner_addr)
        self.engine = CallEngine(self.address, self.state, self.treasury, self.events)

    # ---- internal guards ----

    def _require_quantity(self, quantity: int, limit: Optional[int] = None) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise InvalidValue("quantity must be a positive int", context={"quantity": repr(quantity)})
        if limit is not None and quantity > limit:
            raise InvalidValue("quantity exceeds the per-call limit", context={"quantity": quantity, "limit": limit})

    def _require_supply(self, quantity: int) -> None:
        issued = token.total_issued(self.state.tokens)
        if issued + quantity > self.config.max_supply:
            raise SupplyExceeded(
                context={"requested": quantity, "remaining": self.config.max_supply - issued}
            )

    def _distribute(self, amount: int) -> int:
        return splitter.distribute(
            self.state.splits, self.treasury, self.events, self.address, amount, self.config.remainder_policy
        )

    # ---- public ----

    @entrypoint(payable=True)
    def mint(self, ctx: CallContext, quantity: int) -> List[int]:
        """Public paid mint. Returns the issued token ids."""
        s = self.state
        self._require_quantity(quantity, self.config.max_per_call)

        control.require_not_paused(s.flags)
        self._require_supply(quantity)

        required = s.price * quantity
        if ctx.value < required:
            raise InsufficientFunds(context={"required": required, "value": ctx.value})

        current = s.minted.get(ctx.sender, 0)
        if current + quantity > self.config.max_public_mint:
            raise WalletCapExceeded(
                context={"minted": current, "requested": quantity, "cap": self.config.max_public_mint}
            )

        self.engine.collect(ctx)
        s.minted[ctx.sender] = current + quantity
        ids = token.issue(s.tokens, self.events, ctx.sender, quantity)
        self.events.emit(
            EVENT_MINTED,
            {"buyer": ctx.sender, "quantity": quantity, "first_id": ids[0], "value": ctx.value},
        )
        self._distribute(ctx.value)
        return ids

    @entrypoint(payable=True)
    def deposit(self, ctx: CallContext) -> int:
        """Hold value in the contract until the next withdraw."""
        if ctx.value <= 0:
            raise InvalidValue("deposit requires a positive value")
        self.engine.collect(ctx)
        self.events.emit(EVENT_DEPOSITED, {"sender": ctx.sender, "amount": ctx.value})
        return self.treasury.balance(self.address)

    @entrypoint
    def transfer_token(self, ctx: CallContext, to: Any, token_id: int) -> None:
        token.transfer(self.state.tokens, self.events, ctx.sender, to_address(to), token_id)

    # ---- owner ----

    @entrypoint
    def dev_mint(self, ctx: CallContext, quantity: int) -> List[int]:
        """Owner mint without payment or wallet accounting."""
        s = self.state
        access.require_owner(s.access, ctx.sender)
        self._require_quantity(quantity)
        control.require_dev_mint_open(s.flags)
        self._require_supply(quantity)

        ids = token.issue(s.tokens, self.events, ctx.sender, quantity)
        self.events.emit(EVENT_DEV_MINTED, {"to": ctx.sender, "quantity": quantity, "first_id": ids[0]})
        return ids

    @entrypoint
    def lock_dev_mint(self, ctx: CallContext) -> bool:
        access.require_owner(self.state.access, ctx.sender)
        return control.lock_dev_mint(self.state.flags, self.events, ctx.sender)

    @entrypoint
    def set_price(self, ctx: CallContext, price: int) -> None:
        access.require_owner(self.state.access, ctx.sender)
        if not isinstance(price, int) or isinstance(price, bool) or price <= 0:
            raise InvalidValue("price must be a positive int", context={"price": repr(price)})
        previous = self.state.price
        self.state.price = price
        self.events.emit(EVENT_PRICE_CHANGED, {"previous": previous, "price": price})

    @entrypoint
    def set_splits(self, ctx: CallContext, recipients: Sequence[Any], percentages: Sequence[int]) -> None:
        access.require_owner(self.state.access, ctx.sender)
        splitter.configure(self.state.splits, self.events, list(recipients), list(percentages))

    @entrypoint
    def lock_splits(self, ctx: CallContext) -> bool:
        access.require_owner(self.state.access, ctx.sender)
        return splitter.lock(self.state.splits, self.events, ctx.sender)

    @entrypoint
    def set_paused(self, ctx: CallContext, paused: bool) -> bool:
        access.require_owner(self.state.access, ctx.sender)
        return control.set_paused(self.state.flags, self.events, ctx.sender, paused)

    def pause(self, caller: Any) -> bool:
        return self.set_paused(caller, True)

    def unpause(self, caller: Any) -> bool:
        return self.set_paused(caller, False)

    @entrypoint
    def withdraw(self, ctx: CallContext) -> int:
        """Distribute the contract's full held balance."""
        access.require_owner(self.state.access, ctx.sender)
        amount = self.treasury.balance(self.address)
        paid = self._distribute(amount)
        self.events.emit(EVENT_WITHDRAWN, {"sender": ctx.sender, "amount": paid})
        return paid

    @entrypoint
    def set_base_uri(self, ctx: CallContext, uri: str) -> None:
        access.require_owner(self.state.access, ctx.sender)
        metadata.set_base_uri(self.state.metadata, self.events, uri)

    @entrypoint
    def set_placeholder_uri(self, ctx: CallContext, uri: str) -> None:
        access.require_owner(self.state.access, ctx.sender)
        metadata.set_placeholder_uri(self.state.metadata, self.events, uri)

    @entrypoint
    def reveal(self, ctx: CallContext) -> bool:
        access.require_owner(self.state.access, ctx.sender)
        return metadata.reveal(self.state.metadata, self.events, ctx.sender)

    @entrypoint
    def transfer_ownership(self, ctx: CallContext, new_owner: Any) -> None:
        new = to_address(new_owner) if new_owner else b""
        access.transfer_ownership(self.state.access, self.events, ctx.sender, new)

    # ---- views ----

    @property
    def owner(self) -> Optional[bytes]:
        return access.get_owner(self.state.access)

    @property
    def price(self) -> int:
        return self.state.price

    @property
    def max_supply(self) -> int:
        return self.config.max_supply

    def total_supply(self) -> int:
        return token.total_issued(self.state.tokens)

    def minted_count(self, addr: Any) -> int:
        return self.state.minted.get(to_address(addr), 0)

    def splits(self) -> List[Tuple[bytes, int]]:
        return splitter.entries(self.state.splits)

    @property
    def splits_locked(self) -> bool:
        return self.state.splits.locked

    @property
    def paused(self) -> bool:
        return self.state.flags.mint_paused

    @property
    def dev_mint_locked(self) -> bool:
        return self.state.flags.dev_mint_locked

    @property
    def revealed(self) -> bool:
        return self.state.metadata.revealed

    def balance(self) -> int:
        return self.treasury.balance(self.address)

    def exists(self, token_id: int) -> bool:
        return token.exists(self.state.tokens, token_id)

    def owner_of(self, token_id: int) -> bytes:
        return token.owner_of(self.state.tokens, token_id)

    def balance_of(self, addr: Any) -> int:
        return token.balance_of(self.state.tokens, to_address(addr))

    def token_uri(self, token_id: int) -> str:
        return metadata.token_uri(self.state.metadata, self.state.tokens, token_id, self.config.uri_suffix)

    def summary(self) -> Dict[str, Any]:
        return {
            "address": to_hex(self.address),
            "owner": to_hex(self.owner) if self.owner else None,
            "total_supply": self.total_supply(),
            "max_supply": self.max_supply,
            "price": self.price,
            "paused": self.paused,
            "dev_mint_locked": self.dev_mint_locked,
            "revealed": self.revealed,
            "splits": [{"recipient": to_hex(r), "percentage": p} for r, p in self.splits()],
            "splits_locked": self.splits_locked,
            "minted": {to_hex(a): n for a, n in self.state.minted.items()},
            "balance": self.balance(),
        }


__all__ = ["Edition", "EditionState"]

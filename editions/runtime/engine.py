"""
editions.runtime.engine — atomic execution of contract entry points.

Every state-mutating entry point of a contract runs through
``CallEngine.execute``:

1. reject attached value on non-payable entry points;
2. acquire the contract's reentrancy guard (a nested attempt fails here with
   ReentrantCall, before any effect);
3. checkpoint contract state, treasury balances and the event log;
4. run the entry point body;
5. on any exception restore the checkpoint and re-raise.

Attached value moves from the caller to the contract when the body calls
``engine.collect(ctx)``, so its own precondition checks fail with their own
errors first. A payable body that never collects has its value moved when it
returns. A caller who cannot fund the value fails with InsufficientBalance.

The engine claims its treasury with ``Treasury.bind``; one ledger backs one
contract.

There is no partial commit: a call either completes or leaves no trace. Host
threads are serialized with a re-entrant lock, so a same-thread callback (a
payable sink calling back into the contract) reaches the guard and is
rejected there.

Contracts mark entry points with the ``entrypoint`` decorator:

    class Edition:
        @entrypoint(payable=True)
        def mint(self, ctx: CallContext, quantity: int) -> List[int]: ...

    edition.mint(alice, 3, value=60)
"""

from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, TypeVar

from ..errors import InvalidValue, LedgerError
from .context import CallContext, to_hex
from .events import EventSink
from .treasury import Treasury

log = logging.getLogger(__name__)

T = TypeVar("T")


class GuardedState(Protocol):
    """State object the engine checkpoints; `guard` is never part of a snapshot."""

    guard: Any

    def snapshot(self) -> Any: ...
    def restore(self, snap: Any) -> None: ...


Checkpoint = Tuple[Any, Dict[bytes, int], int]


class CallEngine:
    def __init__(self, address: bytes, state: GuardedState, treasury: Treasury, events: EventSink) -> None:
        self.address = address
        self.state = state
        self.treasury = treasury
        self.events = events
        self._lock = threading.RLock()
        self._uncollected: Optional[CallContext] = None
        self.calls = 0
        self.reverts = 0
        treasury.bind(self)

    # ---- checkpoints ----

    def _checkpoint(self) -> Checkpoint:
        return (self.state.snapshot(), self.treasury.snapshot(), self.events.mark())

    def _rollback(self, cp: Checkpoint) -> None:
        state_snap, balances, mark = cp
        self.state.restore(state_snap)
        self.treasury.restore(balances)
        self.events.truncate(mark)

    # ---- value ----

    def collect(self, ctx: CallContext) -> None:
        """Move the value attached to the running call into the contract (once)."""
        if self._uncollected is not ctx:
            return
        self._uncollected = None
        self.treasury.move(ctx.sender, self.address, ctx.value)

    # ---- execution ----

    def execute(
        self,
        name: str,
        ctx: CallContext,
        body: Callable[[CallContext], T],
        *,
        payable: bool = False,
    ) -> T:
        with self._lock:
            self.calls += 1
            try:
                if ctx.value and not payable:
                    raise InvalidValue(f"{name} does not accept value", context={"value": ctx.value})
                with self.state.guard.hold(name):
                    cp = self._checkpoint()
                    self._uncollected = ctx if ctx.value else None
                    try:
                        result = body(ctx)
                        self.collect(ctx)
                    except BaseException:
                        self._rollback(cp)
                        raise
                    finally:
                        self._uncollected = None
            except LedgerError as exc:
                self.reverts += 1
                log.info("%s from %s reverted: %s (%s)", name, to_hex(ctx.sender), exc.code, exc.message)
                raise
        log.debug("%s from %s ok (value=%d)", name, to_hex(ctx.sender), ctx.value)
        return result


def entrypoint(fn: Optional[Callable[..., Any]] = None, *, payable: bool = False):
    """
    Mark a contract method as a state-mutating entry point.

    The wrapped method receives a CallContext in place of the raw caller; the
    public signature is ``method(caller, *args, value=0, **kwargs)``.
    """

    def decorate(f: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(f)
        def wrapper(self: Any, caller: Any, *args: Any, value: int = 0, **kwargs: Any) -> Any:
            ctx = CallContext(sender=caller, value=value)
            return self.engine.execute(
                f.__name__, ctx, lambda c: f(self, c, *args, **kwargs), payable=payable
            )

        wrapper.__entrypoint__ = {"payable": payable}  # type: ignore[attr-defined]
        return wrapper

    if fn is not None:
        return decorate(fn)
    return decorate


def is_entrypoint(obj: Any) -> bool:
    return callable(obj) and hasattr(obj, "__entrypoint__")


__all__ = ["CallEngine", "GuardedState", "entrypoint", "is_entrypoint"]

"""
editions.runtime — host-side execution support for the edition contract.

- context:  CallContext and address helpers
- events:   validated, per-contract event log
- treasury: in-memory balances with payable-sink hooks
- engine:   atomic, reentrancy-guarded entry point execution
"""

from __future__ import annotations

from .context import CallContext, derive_address, to_address, to_bytes, to_hex
from .engine import CallEngine, entrypoint, is_entrypoint
from .events import CanonicalEvent, Event, EventSink
from .treasury import PayableSink, Treasury

__all__ = [
    "CallContext",
    "derive_address",
    "to_address",
    "to_bytes",
    "to_hex",
    "CallEngine",
    "entrypoint",
    "is_entrypoint",
    "CanonicalEvent",
    "Event",
    "EventSink",
    "PayableSink",
    "Treasury",
]

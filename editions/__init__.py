"""
editions — capped paid minting with locked payment splits.

A single contract issues a capped series of sequential tokens against
payment and pushes every payment to a fixed set of recipients by whole
percentage shares. Pricing, splits and metadata are owner-configured and can
be locked.

- Edition:      the contract (mint controller + admin surface)
- Treasury:     in-memory balances and payable-sink hooks
- EditionConfig / load_config(): caps, price defaults, remainder policy
- errors:       one exception class per rejection kind

    from editions import Edition, Treasury

    treasury = Treasury()
    edition = Edition(owner, treasury=treasury)
    edition.set_splits(owner, [a, b], [60, 40])
    treasury.credit(buyer, 1_000)
    edition.mint(buyer, 3, value=60)
"""

from __future__ import annotations

from .config import EditionConfig, load_config
from .contract import Edition, EditionState
from .runtime import CallContext, EventSink, PayableSink, Treasury, derive_address
from .version import __version__

__all__ = [
    "__version__",
    "Edition",
    "EditionState",
    "EditionConfig",
    "load_config",
    "CallContext",
    "EventSink",
    "PayableSink",
    "Treasury",
    "derive_address",
]

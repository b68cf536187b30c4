# -*- coding: utf-8 -*-
"""
editions.stdlib
===============

State-explicit helpers composed by the edition contract. Each module owns a
small dataclass of state and a set of functions that take that state (and the
contract's event sink) as arguments:

- access:   owner capability (AccessState)
- control:  pause flags, dev-mint latch, reentrancy guard
- token:    sequential token-ownership ledger (TokenLedger)
- splitter: lockable percentage registry and distributor (SplitRegistry)
- metadata: placeholder / revealed URI resolution (MetadataState)
"""
from __future__ import annotations

from . import access, control, metadata, splitter, token

__all__ = ["access", "control", "metadata", "splitter", "token"]

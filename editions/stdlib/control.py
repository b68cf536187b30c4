# -*- coding: utf-8 -*-
"""
editions.stdlib.control
=======================

Control-flow primitives for the edition contract:

1) **Pause flags**
   - `mint_paused` gates the public mint; freely toggled by the owner.
   - `dev_mint_locked` is a one-way latch closing the privileged mint.
   Both emit events only on change; repeated calls are no-ops.

2) **Reentrancy Guard**
   A single in-progress latch owned by the contract state. The call engine
   holds it for the whole of every state-mutating entry point:

       with state.guard.hold("mint"):
           ...  # critical section

   A nested `hold` while the latch is set fails with ReentrantCall before
   anything else happens. The latch is released on every exit path.

Events
------
- `Paused`        : {"sender": bytes}
- `Unpaused`      : {"sender": bytes}
- `DevMintLocked` : {"sender": bytes}
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from ..errors import DevMintLocked, MintingPaused, ReentrantCall
from ..runtime.events import EventSink

__all__ = [
    "PauseFlags",
    "ReentrancyGuard",
    "require_not_paused",
    "set_paused",
    "require_dev_mint_open",
    "lock_dev_mint",
]


@dataclass
class PauseFlags:
    mint_paused: bool = False
    dev_mint_locked: bool = False


# ---- Pausable ---------------------------------------------------------------


def require_not_paused(flags: PauseFlags) -> None:
    if flags.mint_paused:
        raise MintingPaused()


def set_paused(flags: PauseFlags, events: EventSink, caller: bytes, paused: bool) -> bool:
    """
    Idempotently set the mint pause flag. Returns True if the flag changed.
    """
    if flags.mint_paused == bool(paused):
        return False
    flags.mint_paused = bool(paused)
    events.emit(b"Paused" if paused else b"Unpaused", {"sender": caller})
    return True


# ---- Dev mint latch ---------------------------------------------------------


def require_dev_mint_open(flags: PauseFlags) -> None:
    if flags.dev_mint_locked:
        raise DevMintLocked()


def lock_dev_mint(flags: PauseFlags, events: EventSink, caller: bytes) -> bool:
    """One-way; returns False if already locked."""
    if flags.dev_mint_locked:
        return False
    flags.dev_mint_locked = True
    events.emit(b"DevMintLocked", {"sender": caller})
    return True


# ---- Reentrancy Guard -------------------------------------------------------


class ReentrancyGuard:
    def __init__(self) -> None:
        self._holder: Optional[str] = None

    @property
    def entered(self) -> bool:
        return self._holder is not None

    @property
    def holder(self) -> Optional[str]:
        return self._holder

    @contextmanager
    def hold(self, scope: str = "default") -> Iterator[None]:
        if self._holder is not None:
            raise ReentrantCall(context={"scope": scope, "held_by": self._holder})
        self._holder = scope
        try:
            yield
        finally:
            self._holder = None

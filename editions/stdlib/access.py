# -*- coding: utf-8 -*-
"""
editions.stdlib.access
======================

Minimal **Ownable** helper for the edition contract.

- read the current owner (`get_owner`)
- initialize the owner once (`init_owner`)
- check that a caller is the owner (`require_owner`)
- transfer ownership to a new account (`transfer_ownership`)

The owner is the single administrative capability: every privileged entry
point calls `require_owner(state.access, ctx.sender)` first.

Events:
    - "OwnershipTransferred" args: {"previous": bytes, "new": bytes}

Errors:
    - UnauthorizedCaller (ACCESS:NOT_OWNER)
    - InvalidValue      (ACCESS:NEW_OWNER_EMPTY)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidValue, UnauthorizedCaller
from ..runtime.context import to_hex
from ..runtime.events import EventSink

__all__ = [
    "AccessState",
    "get_owner",
    "init_owner",
    "require_owner",
    "transfer_ownership",
]


@dataclass
class AccessState:
    owner: Optional[bytes] = None


def get_owner(access: AccessState) -> Optional[bytes]:
    return access.owner if access.owner else None


def init_owner(access: AccessState, owner: bytes) -> None:
    """
    Initialize the contract owner. Idempotent: does not overwrite if already set.
    """
    if not access.owner:
        access.owner = bytes(owner)


def require_owner(access: AccessState, caller: bytes) -> None:
    owner = get_owner(access)
    if owner is None or owner != caller:
        raise UnauthorizedCaller(context={"caller": to_hex(caller)})


def transfer_ownership(access: AccessState, events: EventSink, caller: bytes, new_owner: bytes) -> None:
    """
    Owner-only: transfer ownership to `new_owner` (must be non-empty).
    """
    require_owner(access, caller)
    if not new_owner:
        raise InvalidValue("new owner must be non-empty", code="ACCESS:NEW_OWNER_EMPTY")

    previous = access.owner or b""
    access.owner = bytes(new_owner)
    events.emit(b"OwnershipTransferred", {"previous": previous, "new": access.owner})

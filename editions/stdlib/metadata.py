# -*- coding: utf-8 -*-
"""
editions.stdlib.metadata
========================

Token metadata resolution with a one-way reveal.

- Before reveal every id resolves to the placeholder URI.
- After reveal an existing id resolves to ``base_uri + str(id) + suffix``;
  unknown ids fail with NonexistentToken.

URIs must be non-empty, at most MAX_URI_LEN characters, and free of
whitespace and control characters (InvalidURI otherwise).
"""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidURI, NonexistentToken
from ..runtime.events import EventSink
from . import token as _token

MAX_URI_LEN = 2048

__all__ = [
    "MetadataState",
    "check_uri",
    "set_base_uri",
    "set_placeholder_uri",
    "reveal",
    "token_uri",
]


@dataclass
class MetadataState:
    base_uri: str = ""
    placeholder_uri: str = ""
    revealed: bool = False


def check_uri(uri: str) -> str:
    if not isinstance(uri, str) or not uri:
        raise InvalidURI("URI must be a non-empty string")
    if len(uri) > MAX_URI_LEN:
        raise InvalidURI("URI too long", context={"len": len(uri)})
    if any(c.isspace() or ord(c) < 0x20 or ord(c) == 0x7F for c in uri):
        raise InvalidURI("URI contains whitespace or control characters")
    return uri


def set_base_uri(meta: MetadataState, events: EventSink, uri: str) -> None:
    meta.base_uri = check_uri(uri)
    events.emit(b"BaseURIChanged", {"uri": meta.base_uri})


def set_placeholder_uri(meta: MetadataState, events: EventSink, uri: str) -> None:
    meta.placeholder_uri = check_uri(uri)
    events.emit(b"PlaceholderURIChanged", {"uri": meta.placeholder_uri})


def reveal(meta: MetadataState, events: EventSink, caller: bytes) -> bool:
    """
    One-way switch to final metadata. Requires a base URI. Returns False if
    already revealed.
    """
    if meta.revealed:
        return False
    if not meta.base_uri:
        raise InvalidURI("base URI must be set before reveal", code="META:NO_BASE_URI")
    meta.revealed = True
    events.emit(b"Revealed", {"sender": caller, "base_uri": meta.base_uri})
    return True


def token_uri(meta: MetadataState, ledger: _token.TokenLedger, token_id: int, suffix: str = "") -> str:
    if not meta.revealed:
        return meta.placeholder_uri
    if not _token.exists(ledger, token_id):
        raise NonexistentToken(context={"token_id": token_id})
    return f"{meta.base_uri}{token_id}{suffix}"

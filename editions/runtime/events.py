"""
editions.runtime.events — per-contract event log.

Every contract instance owns one EventSink. Entry points append events with
``emit(name, args)``; the call engine discards the events of a reverted call
with ``mark()`` / ``truncate(mark)``.

Event shape:
  - name: non-empty bytes (at most MAX_NAME_LEN), e.g. b"Minted"
  - args: mapping of identifier-like str keys to bool | int | str | bytes,
          or lists/tuples of those (stored as tuples)

Malformed events raise LedgerError with code ``EVENT:INVALID``.

Receipt form (``for_receipt``) renders names as 0x-hex and tags each arg with
its kind: b(ytes), z (bool), i(nt), s(tr), l(ist).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..errors import LedgerError

MAX_NAME_LEN = 64
MAX_KEY_LEN = 64
MAX_ARG_LEN = 4096
MAX_INT_BITS = 256

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Event:
    name: bytes
    args: Dict[str, Any]


@dataclass(frozen=True)
class CanonicalEvent:
    name: str
    args: Sequence[Mapping[str, Any]]


def _reject(message: str, **context: Any) -> LedgerError:
    return LedgerError(message, code="EVENT:INVALID", context=context)


# ---- normalization ----------------------------------------------------------


def _event_name(name: Any) -> bytes:
    if not isinstance(name, (bytes, bytearray)) or not name:
        raise _reject("event name must be non-empty bytes", name=repr(name))
    if len(name) > MAX_NAME_LEN:
        raise _reject("event name too long", size=len(name))
    return bytes(name)


def _arg_key(key: Any) -> str:
    if not isinstance(key, str) or len(key) > MAX_KEY_LEN or not _IDENT.match(key):
        raise _reject("event arg key must be a short identifier", key=repr(key))
    return key


def _arg_value(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value.bit_length() > MAX_INT_BITS:
            raise _reject("event int arg exceeds 256 bits", bits=value.bit_length())
        return value
    if isinstance(value, (bytes, bytearray, str)):
        if len(value) > MAX_ARG_LEN:
            raise _reject("event arg too long", size=len(value))
        return bytes(value) if not isinstance(value, str) else value
    if isinstance(value, (list, tuple)):
        return tuple(_arg_value(v) for v in value)
    raise _reject("unsupported event arg type", py_type=type(value).__name__)


def _tagged(value: Any) -> Dict[str, Any]:
    if isinstance(value, bytes):
        return {"t": "b", "v": "0x" + value.hex()}
    if isinstance(value, bool):
        return {"t": "z", "v": value}
    if isinstance(value, int):
        return {"t": "i", "v": value}
    if isinstance(value, str):
        return {"t": "s", "v": value}
    return {"t": "l", "v": [_tagged(v) for v in value]}


# ---- sink -------------------------------------------------------------------


class EventSink:
    def __init__(self) -> None:
        self._log: List[Event] = []

    def emit(self, name: bytes, args: Mapping[str, Any]) -> None:
        ev_name = _event_name(name)
        if not isinstance(args, Mapping):
            raise _reject("event args must be a mapping", py_type=type(args).__name__)
        self._log.append(Event(ev_name, {_arg_key(k): _arg_value(v) for k, v in args.items()}))

    def mark(self) -> int:
        return len(self._log)

    def truncate(self, mark: int) -> None:
        del self._log[mark:]

    def clear(self) -> None:
        del self._log[:]

    def events(self) -> Tuple[Event, ...]:
        return tuple(self._log)

    def names(self) -> List[bytes]:
        return [ev.name for ev in self._log]

    def for_receipt(self) -> List[CanonicalEvent]:
        out = []
        for ev in self._log:
            args = tuple(dict(k=k, **_tagged(v)) for k, v in ev.args.items())
            out.append(CanonicalEvent(name="0x" + ev.name.hex(), args=args))
        return out

    def __len__(self) -> int:
        return len(self._log)


__all__ = ["Event", "CanonicalEvent", "EventSink", "MAX_NAME_LEN", "MAX_KEY_LEN", "MAX_ARG_LEN", "MAX_INT_BITS"]

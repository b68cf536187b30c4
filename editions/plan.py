"""
editions.plan — scripted contract sessions.

A plan deploys one fresh Edition, funds named accounts and runs a list of
entry point calls against it. It backs the ``editions simulate`` command and
is handy for reproducing a scenario outside the test suite.

Plan shape (JSON):

    {
      "config":    {"max_supply": 100, "unit_price": 20},
      "owner":     "deployer",
      "accounts":  {"alice": 1000, "bob": 1000},
      "rejecting": ["mallory"],
      "steps": [
        {"call": "set_splits", "caller": "deployer",
         "args": [["@alice", "@bob"], [60, 40]]},
        {"call": "mint", "caller": "carol", "args": [3], "value": 60},
        {"call": "mint", "caller": "carol", "args": [1], "value": 1,
         "expect": "MINT:INSUFFICIENT_FUNDS"}
      ]
    }

Accounts are referenced by name (or 0x-hex). Inside ``args``/``kwargs`` a
string starting with ``@`` is replaced by the named account's address. Each
step's outcome is ``"ok"`` or the error code of its rejection; ``expect``
defaults to ``"ok"``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import EditionConfig, load_config
from .contract import Edition
from .errors import LedgerError
from .runtime.context import derive_address, to_address, to_hex
from .runtime.engine import is_entrypoint
from .runtime.treasury import Treasury

log = logging.getLogger(__name__)

OK = "ok"

# Convenience wrappers that route through an entry point.
_WRAPPERS = frozenset({"pause", "unpause"})

CALLABLE = frozenset(
    name for name in dir(Edition) if is_entrypoint(getattr(Edition, name))
) | _WRAPPERS


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


class Step(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    call: str
    caller: str
    args: List[Any] = Field(default_factory=list)
    kwargs: Dict[str, Any] = Field(default_factory=dict)
    value: int = Field(default=0, ge=0)
    expect: str = OK

    @field_validator("call")
    @classmethod
    def _known_call(cls, v: str) -> str:
        if v not in CALLABLE:
            raise ValueError(f"unknown entry point {v!r}; expected one of {sorted(CALLABLE)}")
        return v


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    config: Dict[str, Any] = Field(default_factory=dict)
    owner: str = "deployer"
    accounts: Dict[str, int] = Field(default_factory=dict)
    rejecting: List[str] = Field(default_factory=list)
    steps: List[Step] = Field(default_factory=list)

    @field_validator("accounts")
    @classmethod
    def _non_negative(cls, v: Dict[str, int]) -> Dict[str, int]:
        for name, bal in v.items():
            if bal < 0:
                raise ValueError(f"account {name!r} has a negative balance")
        return v


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


class RejectingSink:
    """Payable sink that refuses every payment."""

    def on_receive(self, sender: bytes, amount: int) -> bool:
        return False


def resolve_account(name: str) -> bytes:
    if name.startswith(("0x", "0X")):
        return to_address(name)
    return derive_address(name)


def _resolve_args(value: Any, names: Dict[bytes, str]) -> Any:
    if isinstance(value, str) and value.startswith("@"):
        addr = resolve_account(value[1:])
        names.setdefault(addr, value[1:])
        return addr
    if isinstance(value, list):
        return [_resolve_args(v, names) for v in value]
    if isinstance(value, dict):
        return {k: _resolve_args(v, names) for k, v in value.items()}
    return value


def _jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return value


def build_config(plan: Plan, base: Optional[EditionConfig] = None) -> EditionConfig:
    cfg = base or load_config()
    return cfg.with_overrides(**plan.config) if plan.config else cfg


# -----------------------------------------------------------------------------
# Runner
# -----------------------------------------------------------------------------


def run_plan(plan: Plan, *, stop_on_unexpected: bool = False, config: Optional[EditionConfig] = None) -> Dict[str, Any]:
    """
    Execute `plan` against a fresh contract. Returns a JSON-ready report with
    per-step outcomes, the contract summary and final account balances.
    """
    treasury = Treasury()
    names: Dict[bytes, str] = {}
    for name, bal in plan.accounts.items():
        addr = resolve_account(name)
        names[addr] = name
        if bal:
            treasury.credit(addr, bal)
    for name in plan.rejecting:
        addr = resolve_account(name)
        names.setdefault(addr, name)
        treasury.register_sink(addr, RejectingSink())

    owner = resolve_account(plan.owner)
    names.setdefault(owner, plan.owner)
    edition = Edition(owner, treasury=treasury, config=build_config(plan, config))
    names[edition.address] = "edition"

    outcomes: List[Dict[str, Any]] = []
    unexpected = 0
    for index, step in enumerate(plan.steps):
        caller = resolve_account(step.caller)
        names.setdefault(caller, step.caller)
        fn = getattr(edition, step.call)
        entry: Dict[str, Any] = {"index": index, "call": step.call, "caller": step.caller}
        try:
            kwargs = dict(_resolve_args(step.kwargs, names))
            if step.value:
                kwargs["value"] = step.value
            result = fn(caller, *_resolve_args(step.args, names), **kwargs)
        except LedgerError as exc:
            entry.update(outcome=exc.code, error=_jsonable(exc.to_dict()))
        else:
            entry.update(outcome=OK, result=_jsonable(result))

        entry["expected"] = entry["outcome"] == step.expect
        outcomes.append(entry)
        if not entry["expected"]:
            unexpected += 1
            log.warning("step %d (%s) returned %s, expected %s", index, step.call, entry["outcome"], step.expect)
            if stop_on_unexpected:
                break

    balances = {names.get(a, to_hex(a)): b for a, b in treasury.balances().items()}
    return {
        "steps": outcomes,
        "unexpected": unexpected,
        "summary": edition.summary(),
        "balances": balances,
    }


__all__ = ["Plan", "Step", "RejectingSink", "resolve_account", "build_config", "run_plan", "CALLABLE", "OK"]

# -*- coding: utf-8 -*-
"""
editions.tests.conftest
=======================

Pytest fixtures for the edition contract.

Goals:
- Deterministic named accounts (sha3-derived 20-byte addresses).
- A funded in-memory treasury shared by the contract and the accounts.
- A deployed contract with a 60/40 split, plus a bare one with no splits.
- Small payable sinks for recipient-side behaviour (recording, refusing,
  reentrant).

Usage (inside a test file):
    def test_mint_flow(edition, accounts, treasury):
        ids = edition.mint(accounts["alice"], 3, value=60)
        assert ids == [1, 2, 3]
        assert treasury.balance(accounts["artist"]) == 36
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Tuple

import pytest

from editions.config import EditionConfig
from editions.contract import Edition
from editions.errors import LedgerError
from editions.runtime.context import derive_address
from editions.runtime.treasury import Treasury

# Keep dict/set hash-iteration stable and config free of ambient overrides.
os.environ.setdefault("PYTHONHASHSEED", "0")
for _k in [k for k in os.environ if k.startswith("EDITIONS_")]:
    os.environ.pop(_k)

BUYER_FUNDS = 1_000_000
ACCOUNT_NAMES = ("deployer", "alice", "bob", "carol", "artist", "studio", "mallory")


# --- payable sinks ------------------------------------------------------------


class RecordingSink:
    """Accepts every payment and records it."""

    def __init__(self) -> None:
        self.received: List[Tuple[bytes, int]] = []

    def on_receive(self, sender: bytes, amount: int) -> bool:
        self.received.append((sender, amount))
        return True


class RefusingSink:
    """Refuses every payment."""

    def on_receive(self, sender: bytes, amount: int) -> bool:
        return False


class RaisingSink:
    """Blows up on every payment."""

    def on_receive(self, sender: bytes, amount: int) -> None:
        raise RuntimeError("receiver exploded")


class ReentrantSink:
    """
    On payment, tries to call back into `edition` as `me`. The callback's
    rejection is recorded and the payment itself accepted.
    """

    def __init__(self, edition: Edition, me: bytes, call: str = "mint", args: Tuple[Any, ...] = (1,), value: int = 0) -> None:
        self.edition = edition
        self.me = me
        self.call = call
        self.args = args
        self.value = value
        self.errors: List[LedgerError] = []
        self.results: List[Any] = []

    def on_receive(self, sender: bytes, amount: int) -> bool:
        fn = getattr(self.edition, self.call)
        try:
            self.results.append(fn(self.me, *self.args, value=self.value))
        except LedgerError as exc:
            self.errors.append(exc)
        return True


# --- fixtures ----------------------------------------------------------------


@pytest.fixture(scope="session")
def accounts() -> Dict[str, bytes]:
    return {name: derive_address(name) for name in ACCOUNT_NAMES}


@pytest.fixture()
def config() -> EditionConfig:
    return EditionConfig()


@pytest.fixture()
def treasury(accounts: Dict[str, bytes]) -> Treasury:
    t = Treasury()
    for name in ("alice", "bob", "carol", "mallory"):
        t.credit(accounts[name], BUYER_FUNDS)
    return t


@pytest.fixture()
def bare_edition(accounts: Dict[str, bytes], treasury: Treasury, config: EditionConfig) -> Edition:
    """Deployed contract, no splits configured."""
    return Edition(accounts["deployer"], treasury=treasury, config=config)


@pytest.fixture()
def edition(bare_edition: Edition, accounts: Dict[str, bytes]) -> Edition:
    """Deployed contract with artist 60 / studio 40."""
    bare_edition.set_splits(accounts["deployer"], [accounts["artist"], accounts["studio"]], [60, 40])
    return bare_edition


@pytest.fixture()
def make_edition(accounts: Dict[str, bytes], treasury: Treasury):
    """Factory for contracts with config overrides and the default 60/40 split."""

    def _make(splits: Optional[Dict[str, int]] = None, **overrides: Any) -> Edition:
        cfg = EditionConfig().with_overrides(**overrides)
        e = Edition(accounts["deployer"], treasury=treasury, config=cfg)
        splits = {"artist": 60, "studio": 40} if splits is None else splits
        if splits:
            e.set_splits(accounts["deployer"], [accounts[n] for n in splits], list(splits.values()))
        return e

    return _make


# --- pretty assertion diffs for bytes & small dicts --------------------------


def pytest_assertrepr_compare(op: str, left: Any, right: Any) -> Optional[List[str]]:
    if isinstance(left, (bytes, bytearray)) and isinstance(right, (bytes, bytearray)) and op == "==":
        return [
            "bytes differ:",
            f" left: 0x{bytes(left).hex()}",
            f"right: 0x{bytes(right).hex()}",
        ]
    if isinstance(left, dict) and isinstance(right, dict) and op == "==":
        try:
            lj = json.dumps(left, sort_keys=True, indent=2, default=repr)
            rj = json.dumps(right, sort_keys=True, indent=2, default=repr)
        except (TypeError, ValueError):
            return None
        return ["dicts differ (compact JSON):", " left:", lj, " right:", rj]
    return None

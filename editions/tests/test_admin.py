# -*- coding: utf-8 -*-
"""
Owner-only administration: access checks, price, pause, deposit/withdraw,
ownership transfer and value handling on non-payable entry points.
"""
from __future__ import annotations

import json

import pytest

from editions.errors import (InvalidValue, NoSplitsDefined, TransferFailed,
                             UnauthorizedCaller)
from editions.tests.conftest import BUYER_FUNDS, RefusingSink

OWNER_ONLY = [
    ("dev_mint", (1,)),
    ("lock_dev_mint", ()),
    ("set_price", (5,)),
    ("set_splits", ([b"\x01" * 20], [100])),
    ("lock_splits", ()),
    ("set_paused", (True,)),
    ("withdraw", ()),
    ("set_base_uri", ("ipfs://cid/",)),
    ("set_placeholder_uri", ("ipfs://hidden.json",)),
    ("reveal", ()),
    ("transfer_ownership", (b"\x02" * 20,)),
]


@pytest.mark.parametrize("call,args", OWNER_ONLY, ids=[c for c, _ in OWNER_ONLY])
def test_owner_only_entry_points_reject_others(edition, accounts, call, args):
    before = edition.summary()
    marks = len(edition.events)
    with pytest.raises(UnauthorizedCaller) as ei:
        getattr(edition, call)(accounts["mallory"], *args)
    assert ei.value.code == "ACCESS:NOT_OWNER"
    assert edition.summary() == before
    assert len(edition.events) == marks


# -------------------------------- price ---------------------------------------


def test_set_price_emits_change(edition, accounts):
    edition.set_price(accounts["deployer"], 35)
    ev = edition.events.events()[-1]
    assert ev.name == b"PriceChanged"
    assert ev.args == {"previous": 20, "price": 35}


@pytest.mark.parametrize("price", [0, -5, True, 2.5, "20"])
def test_set_price_rejects_non_positive(edition, accounts, price):
    with pytest.raises(InvalidValue):
        edition.set_price(accounts["deployer"], price)
    assert edition.price == 20


# ------------------------------ pause flag ------------------------------------


def test_set_paused_is_idempotent(edition, accounts):
    owner = accounts["deployer"]
    assert edition.set_paused(owner, False) is False
    assert edition.set_paused(owner, True) is True
    assert edition.set_paused(owner, True) is False
    assert edition.events.names().count(b"Paused") == 1


def test_admin_calls_work_while_paused(edition, accounts):
    owner = accounts["deployer"]
    edition.pause(owner)
    edition.set_price(owner, 10)
    assert edition.dev_mint(owner, 2) == [1, 2]


# --------------------------- deposit / withdraw -------------------------------


def test_deposit_and_withdraw(edition, accounts, treasury):
    carol = accounts["carol"]
    assert edition.deposit(carol, value=50) == 50
    assert edition.deposit(carol, value=51) == 101
    assert treasury.balance(carol) == BUYER_FUNDS - 101
    assert edition.balance() == 101

    paid = edition.withdraw(accounts["deployer"])
    assert paid == 101
    # 60% of 101 = 60, 40% = 40, remainder 1 to the first recipient
    assert treasury.balance(accounts["artist"]) == 61
    assert treasury.balance(accounts["studio"]) == 40
    assert edition.balance() == 0

    ev = edition.events.events()[-1]
    assert ev.name == b"Withdrawn"
    assert ev.args == {"sender": accounts["deployer"], "amount": 101}


def test_deposit_requires_value(edition, accounts):
    with pytest.raises(InvalidValue):
        edition.deposit(accounts["carol"])


def test_withdraw_empty_balance_is_zero(edition, accounts):
    assert edition.withdraw(accounts["deployer"]) == 0


def test_withdraw_without_splits(bare_edition, accounts):
    bare_edition.deposit(accounts["carol"], value=10)
    with pytest.raises(NoSplitsDefined):
        bare_edition.withdraw(accounts["deployer"])
    assert bare_edition.balance() == 10


def test_withdraw_with_refusing_recipient_keeps_balance(edition, accounts, treasury):
    edition.deposit(accounts["carol"], value=100)
    treasury.register_sink(accounts["studio"], RefusingSink())
    with pytest.raises(TransferFailed):
        edition.withdraw(accounts["deployer"])
    assert edition.balance() == 100
    assert treasury.balance(accounts["artist"]) == 0


# ---------------------------- value handling ----------------------------------


@pytest.mark.parametrize("call,args", [("set_price", (5,)), ("lock_splits", ()), ("withdraw", ())])
def test_non_payable_rejects_value(edition, accounts, treasury, call, args):
    owner = accounts["deployer"]
    treasury.credit(owner, 10)
    with pytest.raises(InvalidValue) as ei:
        getattr(edition, call)(owner, *args, value=10)
    assert ei.value.context == {"value": 10}
    assert treasury.balance(owner) == 10


# ------------------------------- ownership ------------------------------------


def test_transfer_ownership(edition, accounts):
    old, new = accounts["deployer"], accounts["carol"]
    edition.transfer_ownership(old, new)
    assert edition.owner == new

    ev = edition.events.events()[-1]
    assert ev.name == b"OwnershipTransferred"
    assert ev.args == {"previous": old, "new": new}

    with pytest.raises(UnauthorizedCaller):
        edition.set_price(old, 1)
    edition.set_price(new, 1)
    assert edition.price == 1


def test_transfer_ownership_rejects_empty(edition, accounts):
    with pytest.raises(InvalidValue) as ei:
        edition.transfer_ownership(accounts["deployer"], b"")
    assert ei.value.code == "ACCESS:NEW_OWNER_EMPTY"
    assert edition.owner == accounts["deployer"]


def test_summary_is_json_ready(edition, accounts):
    edition.mint(accounts["alice"], 2, value=40)
    s = edition.summary()
    assert s["total_supply"] == 2
    assert s["splits"][0]["percentage"] == 60
    assert s["owner"] == "0x" + accounts["deployer"].hex()
    json.dumps(s)

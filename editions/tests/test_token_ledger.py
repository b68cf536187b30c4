# -*- coding: utf-8 -*-
"""Sequential ownership ledger: batch issue, lookups and holder transfers."""
from __future__ import annotations

import pytest

from editions.errors import InvalidValue, NonexistentToken, UnauthorizedCaller
from editions.runtime.events import EventSink
from editions.stdlib import token

A = b"\xaa" * 20
B = b"\xbb" * 20
C = b"\xcc" * 20


def test_batch_issue_records_one_run():
    led = token.TokenLedger()
    sink = EventSink()
    assert token.issue(led, sink, A, 3) == [1, 2, 3]
    assert token.issue(led, sink, B, 2) == [4, 5]
    assert led.owners == {1: A, 4: B}
    assert [token.owner_of(led, i) for i in range(1, 6)] == [A, A, A, B, B]
    assert token.total_issued(led) == 5
    assert (token.balance_of(led, A), token.balance_of(led, B)) == (3, 2)
    assert sink.names() == [b"Transfer"] * 5
    assert sink.events()[0].args == {"from": b"", "to": A, "token_id": 1}


def test_first_id_zero():
    led = token.TokenLedger(first_id=0)
    assert token.issue(led, EventSink(), A, 2) == [0, 1]
    assert token.exists(led, 0)
    assert not token.exists(led, 2)


@pytest.mark.parametrize("token_id", [0, 4, -1, "1"])
def test_owner_of_unknown(token_id):
    led = token.TokenLedger()
    token.issue(led, EventSink(), A, 3)
    with pytest.raises(NonexistentToken):
        token.owner_of(led, token_id)


def test_issue_validation():
    led = token.TokenLedger()
    with pytest.raises(InvalidValue):
        token.issue(led, EventSink(), b"", 1)
    with pytest.raises(InvalidValue):
        token.issue(led, EventSink(), A, 0)


def test_transfer_splits_the_run():
    led = token.TokenLedger()
    sink = EventSink()
    token.issue(led, sink, A, 4)
    token.transfer(led, sink, A, C, 2)
    assert [token.owner_of(led, i) for i in range(1, 5)] == [A, C, A, A]
    assert (token.balance_of(led, A), token.balance_of(led, C)) == (3, 1)
    assert sink.events()[-1].args == {"from": A, "to": C, "token_id": 2}


def test_transfer_last_of_run():
    led = token.TokenLedger()
    token.issue(led, EventSink(), A, 2)
    token.issue(led, EventSink(), B, 1)
    token.transfer(led, EventSink(), A, C, 2)
    assert [token.owner_of(led, i) for i in range(1, 4)] == [A, C, B]


def test_transfer_requires_holder():
    led = token.TokenLedger()
    token.issue(led, EventSink(), A, 1)
    with pytest.raises(UnauthorizedCaller) as ei:
        token.transfer(led, EventSink(), B, C, 1)
    assert ei.value.code == "TOKEN:NOT_HOLDER"


def test_contract_transfer_token(edition, accounts):
    alice, bob = accounts["alice"], accounts["bob"]
    edition.mint(alice, 3, value=60)
    edition.transfer_token(alice, bob, 3)
    assert edition.owner_of(3) == bob
    assert edition.balance_of(alice) == 2
    assert edition.balance_of(bob) == 1
    # transfers do not count against the wallet cap
    assert edition.minted_count(bob) == 0
    assert edition.total_supply() == 3


def test_contract_transfer_unknown_token(edition, accounts):
    with pytest.raises(NonexistentToken):
        edition.transfer_token(accounts["alice"], accounts["bob"], 1)
    assert not edition.exists(1)

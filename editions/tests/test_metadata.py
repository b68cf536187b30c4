# -*- coding: utf-8 -*-
"""Metadata URIs and the one-way reveal."""
from __future__ import annotations

import pytest

from editions.contract import Edition
from editions.errors import InvalidURI, NonexistentToken
from editions.stdlib import metadata


def test_placeholder_before_reveal(edition, accounts):
    edition.mint(accounts["alice"], 1, value=20)
    assert edition.token_uri(1) == "ipfs://placeholder/hidden.json"
    # unknown ids also resolve to the placeholder until reveal
    assert edition.token_uri(999) == "ipfs://placeholder/hidden.json"


def test_reveal_switches_to_base_uri(edition, accounts):
    owner = accounts["deployer"]
    edition.mint(accounts["alice"], 2, value=40)
    edition.set_base_uri(owner, "ipfs://cid/")
    assert edition.reveal(owner) is True
    assert edition.revealed
    assert edition.token_uri(2) == "ipfs://cid/2.json"
    with pytest.raises(NonexistentToken):
        edition.token_uri(3)


def test_reveal_is_one_way_and_idempotent(edition, accounts):
    owner = accounts["deployer"]
    edition.set_base_uri(owner, "ipfs://cid/")
    assert edition.reveal(owner) is True
    assert edition.reveal(owner) is False
    assert edition.events.names().count(b"Revealed") == 1


def test_reveal_requires_base_uri(edition, accounts):
    with pytest.raises(InvalidURI) as ei:
        edition.reveal(accounts["deployer"])
    assert ei.value.code == "META:NO_BASE_URI"
    assert not edition.revealed


def test_base_uri_can_change_after_reveal(edition, accounts):
    owner = accounts["deployer"]
    edition.dev_mint(owner, 1)
    edition.set_base_uri(owner, "ipfs://a/")
    edition.reveal(owner)
    edition.set_base_uri(owner, "https://meta.example/")
    assert edition.token_uri(1) == "https://meta.example/1.json"


def test_placeholder_uri_update(edition, accounts):
    edition.set_placeholder_uri(accounts["deployer"], "ipfs://other/hidden.json")
    assert edition.token_uri(1) == "ipfs://other/hidden.json"
    ev = edition.events.events()[-1]
    assert ev.name == b"PlaceholderURIChanged"


@pytest.mark.parametrize("uri", ["", "ipfs://a b/", "ipfs://cid/\n", "x" * (metadata.MAX_URI_LEN + 1), 42])
def test_invalid_uris(edition, accounts, uri):
    with pytest.raises(InvalidURI):
        edition.set_base_uri(accounts["deployer"], uri)
    assert edition.state.metadata.base_uri == ""


def test_base_uri_at_deploy(accounts, treasury, config):
    e = Edition(accounts["deployer"], treasury=treasury, config=config, base_uri="ipfs://deploy/")
    e.set_splits(accounts["deployer"], [accounts["artist"]], [100])
    e.mint(accounts["alice"], 1, value=20)
    e.reveal(accounts["deployer"])
    assert e.token_uri(1) == "ipfs://deploy/1.json"


def test_uri_suffix_is_configurable(make_edition, accounts):
    e = make_edition(uri_suffix="")
    owner = accounts["deployer"]
    e.dev_mint(owner, 1)
    e.set_base_uri(owner, "ar://tx/")
    e.reveal(owner)
    assert e.token_uri(1) == "ar://tx/1"

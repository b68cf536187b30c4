"""
editions.errors — structured rejection types for contract calls.

Every failed entry point raises exactly one of the classes below. They share
the shape of a VM error: a short machine-readable ``code`` (``AREA:REASON``),
a human-readable ``message`` and an optional ``context`` dict for debugging or
RPC wiring.

Supported call patterns:

    SupplyExceeded()                                  # default code & message
    SupplyExceeded("requested 10, remaining 5")
    SupplyExceeded("...", context={"remaining": 5})
    LedgerError("SOME:CODE", "message")               # legacy 2-positional form

None of these are recovered inside the contract; the call engine rolls back
state and re-raises them to the caller.
"""

from __future__ import annotations

from typing import Any, Dict


class LedgerError(Exception):
    """Base class for all contract call rejections."""

    code: str = "LEDGER:ERROR"
    default_message: str = "call rejected"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        code = type(self).code
        context: Dict[str, Any] = {}

        if "code" in kwargs:
            code = str(kwargs.pop("code"))
        if "context" in kwargs:
            ctx = kwargs.pop("context")
            if ctx is not None:
                context = dict(ctx)
        if kwargs:
            raise TypeError(f"unexpected keyword arguments: {sorted(kwargs)}")

        if len(args) == 0:
            message = type(self).default_message
        elif len(args) == 1:
            message = str(args[0])
        else:
            code = str(args[0])
            message = str(args[1])

        super().__init__(message)
        self.code = code
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }


class ContextError(LedgerError):
    """Malformed call context (addresses, value)."""

    code = "CTX:INVALID"
    default_message = "invalid call context"


# ---- Mint controller ----------------------------------------------------------


class MintingPaused(LedgerError):
    code = "MINT:PAUSED"
    default_message = "public minting is paused"


class SupplyExceeded(LedgerError):
    code = "MINT:SUPPLY_EXCEEDED"
    default_message = "mint would exceed the maximum supply"


class InsufficientFunds(LedgerError):
    code = "MINT:INSUFFICIENT_FUNDS"
    default_message = "attached value is below the required price"


class WalletCapExceeded(LedgerError):
    code = "MINT:WALLET_CAP"
    default_message = "mint would exceed the per-wallet cap"


class DevMintLocked(LedgerError):
    code = "MINT:DEV_LOCKED"
    default_message = "privileged minting is locked"


# ---- Split registry / distributor --------------------------------------------


class SplitsLocked(LedgerError):
    code = "SPLIT:LOCKED"
    default_message = "split configuration is locked"


class LengthMismatch(LedgerError):
    code = "SPLIT:LENGTH_MISMATCH"
    default_message = "recipients and percentages differ in length"


class InvalidSplitTotal(LedgerError):
    code = "SPLIT:BAD_TOTAL"
    default_message = "split percentages must sum to exactly 100"


class NoSplitsDefined(LedgerError):
    code = "SPLIT:EMPTY"
    default_message = "no split recipients configured"


class DistributionMismatch(LedgerError):
    code = "SPLIT:MISMATCH"
    default_message = "distributed total does not equal the amount"


class TransferFailed(LedgerError):
    code = "TREASURY:TRANSFER_FAILED"
    default_message = "recipient rejected the transfer"


class InsufficientBalance(LedgerError):
    """Account balance cannot cover a debit (e.g. the value attached to a call)."""

    code = "TREASURY:INSUFFICIENT"
    default_message = "account balance too low"


# ---- Access / control -----------------------------------------------------------


class ReentrantCall(LedgerError):
    code = "CONTROL:REENTRANT"
    default_message = "reentrant call rejected"


class UnauthorizedCaller(LedgerError):
    code = "ACCESS:NOT_OWNER"
    default_message = "caller is not the owner"


# ---- Inputs / metadata ----------------------------------------------------------


class InvalidURI(LedgerError):
    code = "META:INVALID_URI"
    default_message = "invalid metadata URI"


class InvalidValue(LedgerError):
    code = "INPUT:INVALID_VALUE"
    default_message = "invalid argument value"


class NonexistentToken(LedgerError):
    code = "TOKEN:NONEXISTENT"
    default_message = "token does not exist"


__all__ = [
    "LedgerError",
    "ContextError",
    "MintingPaused",
    "SupplyExceeded",
    "InsufficientFunds",
    "WalletCapExceeded",
    "DevMintLocked",
    "SplitsLocked",
    "LengthMismatch",
    "InvalidSplitTotal",
    "NoSplitsDefined",
    "DistributionMismatch",
    "TransferFailed",
    "InsufficientBalance",
    "ReentrantCall",
    "UnauthorizedCaller",
    "InvalidURI",
    "InvalidValue",
    "NonexistentToken",
]

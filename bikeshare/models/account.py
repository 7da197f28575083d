from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Account:
    """
    The session facts about an account, passed explicitly into each operation.

    ``registered`` is only as fresh as the read that produced it; the
    ledger may register the account at any time.
    """

    account_id: str
    signed_in: bool = False
    registered: bool = False


@dataclass(frozen=True)
class StorageBalance:
    """The storage deposit an account holds on the token ledger."""

    total: int
    available: int


@dataclass(frozen=True)
class TokenAccount:
    """A balance exactly as the token ledger returned it."""

    account_id: str
    balance: int


@dataclass(frozen=True)
class RentalFeeConfig:
    """The fee for using a bike, read once at startup."""

    amount_to_use_bike: int

    @property
    def amount(self) -> int:
        return self.amount_to_use_bike


def is_registered(storage_balance: Optional[StorageBalance]) -> bool:
    """An account is registered when the ledger holds any storage record for it."""
    return storage_balance is not None

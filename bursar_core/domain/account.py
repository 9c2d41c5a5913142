from __future__ import annotations

from dataclasses import dataclass

from bursar_core.domain.enums import AccountType
from bursar_core.domain.identifiers import generate_id


@dataclass
class Account:
    id: str
    name: str
    group: str
    type: AccountType = AccountType.ASSET
    currency: str = "UGX"
    opening_balance: float = 0.0
    version: int = 1

    @staticmethod
    def create(
        name: str,
        group: str,
        type: AccountType = AccountType.ASSET,
        currency: str = "UGX",
        opening_balance: float = 0.0,
    ) -> "Account":
        return Account(
            id=generate_id(),
            name=name,
            group=group,
            type=type,
            currency=currency,
            opening_balance=opening_balance,
        )


__all__ = ["Account"]

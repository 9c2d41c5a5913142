from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AccountBalance:
    account_id: str
    account_name: str
    group: str
    currency: str
    opening_balance: float
    balance: float


@dataclass(frozen=True)
class RequirementAvailability:
    brought: float
    transfer_ins: float
    used: float
    available: float


@dataclass(frozen=True)
class StudentBalance:
    student_id: str
    billed: float
    paid: float
    outstanding: float

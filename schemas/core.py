"""
Pydantic schemas for core ledger payloads.

Field names follow Python conventions; the camelCase names expected by the
ledger are aliases, so payloads are produced with ``model_dump(by_alias=True)``.
"""

from pydantic import BaseModel, Field
from typing import List

BLAME = "fio-sync"


class CoreTransfer(BaseModel):
    """Single posting between a debit and a credit account"""

    id: str
    value_date: str = Field(..., alias="valueDate")
    credit: str
    debit: str
    amount: str
    currency: str

    class Config:
        populate_by_name = True


class CoreTransaction(BaseModel):
    """Group of transfers sharing one transaction id"""

    id: str
    blame: str = BLAME
    transfers: List[CoreTransfer] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class CoreAccountStatement(BaseModel):
    account_number: str = Field(..., alias="accountNumber")
    transactions: List[CoreTransaction] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class CoreAccount(BaseModel):
    account_number: str = Field(..., alias="accountNumber")
    currency: str
    is_balance_check: bool = Field(False, alias="isBalanceCheck")

    class Config:
        populate_by_name = True

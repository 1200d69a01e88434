"""
Pydantic schemas for the FIO account statement payload.

FIO reports every transfer as a set of numbered columns, each wrapped in a
node ``{"value": ..., "name": ..., "id": ...}`` that may be ``null``. The
models below give the columns used by the sync readable names while keeping
the bank's column keys as aliases.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List


class StringNode(BaseModel):
    value: str
    name: Optional[str] = None
    id: Optional[int] = None

    class Config:
        frozen = True


class FloatNode(BaseModel):
    value: float
    name: Optional[str] = None
    id: Optional[int] = None

    class Config:
        frozen = True


class IntNode(BaseModel):
    value: int
    name: Optional[str] = None
    id: Optional[int] = None

    class Config:
        frozen = True


class FioTransfer(BaseModel):
    """
    One line item ("pohyb") of the statement.

    Column map:
        column0:  value date, ``YYYY-MM-DD+HHMM``
        column1:  signed amount
        column2:  counterpart account (absent for fees, taxes, card payments)
        column17: id of the transaction ("pokyn") the transfer belongs to
        column22: id of the transfer itself
    """

    value_date: StringNode = Field(..., alias="column0")
    amount: FloatNode = Field(..., alias="column1")
    counterpart_account: Optional[StringNode] = Field(None, alias="column2")
    transaction_id: IntNode = Field(..., alias="column17")
    transfer_id: IntNode = Field(..., alias="column22")

    class Config:
        frozen = True
        populate_by_name = True
        extra = "ignore"


class FioAccountInfo(BaseModel):
    iban: str
    currency: str
    account_id: Optional[str] = Field(None, alias="accountId")
    bank_id: Optional[str] = Field(None, alias="bankId")
    bic: Optional[str] = None
    id_from: Optional[int] = Field(None, alias="idFrom")
    id_to: Optional[int] = Field(None, alias="idTo")
    id_last_download: Optional[int] = Field(None, alias="idLastDownload")

    class Config:
        frozen = True
        populate_by_name = True
        extra = "ignore"


class FioTransactionList(BaseModel):
    transaction: List[FioTransfer] = Field(default_factory=list)

    @field_validator("transaction", mode="before")
    @classmethod
    def empty_when_null(cls, v):
        """FIO sends ``null`` instead of an empty list"""
        if v is None:
            return []
        return v

    class Config:
        frozen = True


class FioStatementBody(BaseModel):
    info: FioAccountInfo
    transaction_list: FioTransactionList = Field(
        default_factory=FioTransactionList, alias="transactionList"
    )

    @field_validator("transaction_list", mode="before")
    @classmethod
    def empty_list_when_null(cls, v):
        if v is None:
            return {}
        return v

    class Config:
        frozen = True
        populate_by_name = True


class FioAccountStatement(BaseModel):
    """Envelope returned by ``GET /last/{token}/transactions.json``"""

    account_statement: FioStatementBody = Field(..., alias="accountStatement")

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def iban(self) -> str:
        return self.account_statement.info.iban

    @property
    def currency(self) -> str:
        return self.account_statement.info.currency

    @property
    def transfers(self) -> List[FioTransfer]:
        return self.account_statement.transaction_list.transaction

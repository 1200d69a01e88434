"""
Pydantic schemas for the two sides of the sync.

Schemas:
    fio: FIO account statement envelope and its column-encoded transfers
    core: Core ledger accounts, transactions and transfers

Usage:
    from schemas.fio import FioAccountStatement
    from schemas.core import CoreAccount, CoreTransaction

Example:
    statement = FioAccountStatement.model_validate(response.json())
    statement.iban, statement.currency, len(statement.transfers)

    account = CoreAccount(account_number="CZ001", currency="CZK")
    account.model_dump(by_alias=True)
    # {"accountNumber": "CZ001", "currency": "CZK", "isBalanceCheck": False}
"""

__all__ = [
    "fio",
    "core",
]

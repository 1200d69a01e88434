"""
Transform FIO account statements into core ledger account statements.

The statement contains all transfers realized in a given time period. FIO
distinguishes a transaction ("pokyn") from a transfer ("pohyb"): a
transaction holds 1..N transfers and each transfer belongs to exactly one
transaction. The ledger uses the same two-level model, so transfers are
grouped by their transaction id.
"""

import re
from datetime import datetime, timezone
from typing import Dict, List

from schemas.core import BLAME, CoreAccount, CoreAccountStatement, CoreTransaction, CoreTransfer
from schemas.fio import FioAccountStatement, FioTransfer

# Counterpart used for transfers without a counterpart account (fees, taxes, card payments)
FIO_ACCOUNT = "FIO"

_VALUE_DATE = re.compile(r"^(\d{4}-\d{2}-\d{2})([+-]\d{2}:?\d{2})?$")


def to_core_account_statement(statement: FioAccountStatement) -> CoreAccountStatement:
    """
    Convert FIO statement into core account statement.

    Transactions keep the order in which their first transfer appears in the
    statement, transfers keep their statement order within a transaction.
    """
    return CoreAccountStatement(
        account_number=statement.iban,
        transactions=_to_core_transactions(statement.transfers, statement.iban, statement.currency),
    )


def extract_unique_core_accounts(statement: FioAccountStatement) -> List[CoreAccount]:
    """
    Collect counterpart accounts referenced by the statement.

    Each counterpart appears once, in first-seen order. The main account is
    always appended last, even when it was already seen as a counterpart;
    the reconciler tolerates the duplicate.
    """
    seen = set()
    accounts = []

    for transfer in statement.transfers:
        account_number = _counterpart_account_number(transfer)
        if account_number in seen:
            continue
        seen.add(account_number)
        accounts.append(CoreAccount(
            account_number=account_number,
            currency=statement.currency,
            is_balance_check=False,
        ))

    accounts.append(CoreAccount(
        account_number=statement.iban,
        currency=statement.currency,
        is_balance_check=False,
    ))
    return accounts


def _to_core_transactions(
    transfers: List[FioTransfer],
    main_account_number: str,
    main_account_currency: str
) -> List[CoreTransaction]:
    transactions: Dict[str, CoreTransaction] = {}

    for transfer in transfers:
        transaction_id = str(transfer.transaction_id.value)
        core_transfer = _to_core_transfer(transfer, main_account_number, main_account_currency)

        if transaction_id in transactions:
            transactions[transaction_id].transfers.append(core_transfer)
        else:
            transactions[transaction_id] = CoreTransaction(
                id=transaction_id,
                blame=BLAME,
                transfers=[core_transfer],
            )

    return list(transactions.values())


def _to_core_transfer(
    transfer: FioTransfer,
    main_account_number: str,
    main_account_currency: str
) -> CoreTransfer:
    return CoreTransfer(
        id=str(transfer.transfer_id.value),
        value_date=_format_instant(_parse_value_date(transfer.value_date.value)),
        credit=_credit_account_number(transfer, main_account_number),
        debit=_debit_account_number(transfer, main_account_number),
        amount=_format_amount(transfer.amount.value),
        # FIO does not report the counterpart currency
        currency=main_account_currency,
    )


def _counterpart_account_number(transfer: FioTransfer) -> str:
    node = transfer.counterpart_account
    if node is not None and node.value:
        return node.value
    return FIO_ACCOUNT


def _debit_account_number(transfer: FioTransfer, main_account_number: str) -> str:
    if transfer.amount.value > 0:
        return _counterpart_account_number(transfer)
    return main_account_number


def _credit_account_number(transfer: FioTransfer, main_account_number: str) -> str:
    if transfer.amount.value < 0:
        return _counterpart_account_number(transfer)
    return main_account_number


def _parse_value_date(value: str) -> datetime:
    """Parse ``YYYY-MM-DD+HHMM`` as midnight at the given offset (UTC when missing)"""
    match = _VALUE_DATE.match(value.strip())
    if match is None:
        raise ValueError(f"Unsupported FIO value date: {value!r}")

    date_part, offset = match.groups()
    return datetime.strptime(
        f"{date_part}T00:00:00{offset or '+0000'}",
        "%Y-%m-%dT%H:%M:%S%z"
    )


def _format_instant(value: datetime) -> str:
    """Render as UTC instant with millisecond precision, e.g. ``2023-01-04T23:00:00.000Z``"""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _format_amount(amount: float) -> str:
    """Absolute amount as the shortest decimal string (``150``, ``150.5``)"""
    value = abs(amount)
    if value.is_integer():
        return str(int(value))
    return repr(value)

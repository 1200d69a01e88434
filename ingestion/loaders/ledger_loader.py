"""
Load accounts and transactions into the core ledger with checkpointing
"""

from typing import List, Optional, Sequence

from core.config import Settings
from core.exceptions import NotFoundError
from ingestion.batching import run_batched
from ingestion.checkpoint import CheckpointStore
from ingestion.loaders.ledger_client import LedgerClient
from schemas.core import CoreAccount, CoreTransaction
import logging

logger = logging.getLogger(__name__)


class LedgerLoader:
    """
    Push synchronized data into the ledger of one tenant.

    Ensures:
    - Missing accounts are created, existing ones left untouched
    - Transactions are submitted in bounded parallel batches
    - Checkpoint is written after every successful batch, never after a failed one
    """

    def __init__(
        self,
        ledger: LedgerClient,
        checkpoints: CheckpointStore,
        checkpoint_namespace: str,
        accounts_parallelism_size: int = 10,
        transactions_parallelism_size: int = 10
    ):
        self.ledger = ledger
        self.checkpoints = checkpoints
        self.checkpoint_namespace = checkpoint_namespace
        self.accounts_parallelism_size = accounts_parallelism_size
        self.transactions_parallelism_size = transactions_parallelism_size

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        ledger: LedgerClient,
        checkpoints: CheckpointStore
    ) -> "LedgerLoader":
        return cls(
            ledger=ledger,
            checkpoints=checkpoints,
            checkpoint_namespace=settings.CHECKPOINT_NAMESPACE,
            accounts_parallelism_size=settings.ACCOUNTS_PARALLELISM_SIZE,
            transactions_parallelism_size=settings.TRANSACTIONS_PARALLELISM_SIZE
        )

    async def create_missing_accounts(self, accounts: Sequence[CoreAccount]):
        """
        Create every account the ledger does not know yet.

        Only a not-found answer leads to creation; any other failure
        propagates and fails the current batch.
        """

        async def ensure_account(account: CoreAccount, index: int):
            try:
                await self.ledger.get_account(account.account_number)
                logger.info(f"Account {account.account_number} already exists")
            except NotFoundError:
                await self.ledger.create_account(account)
                logger.info(f"Created account {account.account_number}")

        await run_batched(accounts, self.accounts_parallelism_size, ensure_account)

    async def create_transactions(self, transactions: Sequence[CoreTransaction], account_number: str):
        """
        Submit transactions and advance checkpoint after each batch.

        Args:
            transactions: Transactions in statement order
            account_number: Main account the checkpoint belongs to
        """

        async def submit(transaction: CoreTransaction, index: int) -> int:
            await self.ledger.create_transaction(transaction)
            # TODO: checkpoint the ledger-assigned transaction id once the ledger returns one
            transaction_id = index
            logger.info(f"Created transaction ID {transaction_id}")
            return transaction_id

        async def advance_checkpoint(transaction_ids: List[int]):
            max_id = max(transaction_ids)
            await self.checkpoints.set(self.checkpoint_namespace, account_number, max_id)
            logger.info(f"Max ID {max_id}")

        await run_batched(
            transactions,
            self.transactions_parallelism_size,
            submit,
            advance_checkpoint
        )

    async def get_transaction_checkpoint(self, account_number: str) -> Optional[int]:
        return await self.checkpoints.get(self.checkpoint_namespace, account_number)

"""
Sync Runner - Orchestrates Fetch, Transform, Load for one FIO account.

Pipeline phases:
1. Checkpoint - Read last synchronized transaction
2. Extract - Download statement from FIO (with one too-early retry)
3. Accounts - Create counterpart accounts missing in the ledger
4. Transform - Group FIO transfers into core transactions
5. Load - Submit transactions, advancing checkpoint per batch
"""

from typing import Any, Dict
import logging

from core.config import Settings
from core.exceptions import SyncException
from ingestion.checkpoint import SQLCheckpointStore
from ingestion.extractors.fio_client import FioClient
from ingestion.loaders.ledger_client import LedgerClient
from ingestion.loaders.ledger_loader import LedgerLoader
from ingestion.transformers.statement import extract_unique_core_accounts, to_core_account_statement

logger = logging.getLogger(__name__)


class SyncRunner:
    """
    Sync orchestrator

    Responsibilities:
    - Resume from the stored checkpoint
    - Reconcile accounts before submitting transactions referencing them
    - Leave checkpoint advancement to the loader (one write per batch)
    """

    def __init__(self, fio: FioClient, loader: LedgerLoader):
        self.fio = fio
        self.loader = loader

    async def run(self, account_number: str, token: str) -> Dict[str, Any]:
        """
        Synchronize one FIO account into the ledger.

        Args:
            account_number: IBAN of the FIO account, key of the checkpoint
            token: FIO api token of the account

        Returns:
            Dictionary with run statistics:
            - status: "success"
            - account_number: Synchronized account
            - checkpoint_before: Checkpoint the run started from
            - accounts: Number of distinct accounts reconciled
            - transactions: Number of transactions submitted

        Raises:
            SyncException: Any failure; the checkpoint stays at the value
                written by the last successful batch
        """
        checkpoint_before = None

        try:
            # --------------------------------------------------
            # PHASE 1: CHECKPOINT
            # --------------------------------------------------
            checkpoint_before = await self.loader.get_transaction_checkpoint(account_number)
            logger.info(f"Starting sync for {account_number} (checkpoint: {checkpoint_before})")

            # --------------------------------------------------
            # PHASE 2: EXTRACTION
            # --------------------------------------------------
            fio_statement = await self.fio.get_account_statement(token, checkpoint_before, True)

            # --------------------------------------------------
            # PHASE 3: ACCOUNTS
            # --------------------------------------------------
            accounts = extract_unique_core_accounts(fio_statement)
            await self.loader.create_missing_accounts(accounts)

            # --------------------------------------------------
            # PHASE 4: TRANSFORMATION
            # --------------------------------------------------
            core_statement = to_core_account_statement(fio_statement)
            logger.info(
                f"Transformed {len(fio_statement.transfers)} transfers into "
                f"{len(core_statement.transactions)} transactions"
            )

            # --------------------------------------------------
            # PHASE 5: LOAD
            # --------------------------------------------------
            await self.loader.create_transactions(core_statement.transactions, account_number)

            result = {
                "status": "success",
                "account_number": account_number,
                "checkpoint_before": checkpoint_before,
                "accounts": len({account.account_number for account in accounts}),
                "transactions": len(core_statement.transactions)
            }

            logger.info(
                f"Sync completed for {account_number}: "
                f"Accounts: {result['accounts']}, Transactions: {result['transactions']}"
            )
            return result

        except SyncException as e:
            logger.error(
                f"Sync failed for {account_number}: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            raise

        except Exception as e:
            logger.exception(f"Unexpected error while syncing {account_number}")
            raise SyncException(
                "Unexpected error in sync pipeline",
                context={
                    "account_number": account_number,
                    "checkpoint_before": checkpoint_before
                },
                original_exception=e
            )


async def sync_accounts(settings: Settings, session_factory) -> Dict[str, Dict[str, Any]]:
    """
    Run sync for every account in ``settings.FIO_ACCOUNTS``.

    A failing account is logged and does not stop the others.

    Returns:
        Mapping of account number to run statistics or error description
    """
    fio = FioClient.from_settings(settings)
    results: Dict[str, Dict[str, Any]] = {}

    if not settings.FIO_ACCOUNTS:
        logger.warning("No FIO accounts configured. Skipping sync.")
        return results

    for account_number, token in settings.FIO_ACCOUNTS.items():
        try:
            async with session_factory() as session, LedgerClient.from_settings(settings) as ledger:
                loader = LedgerLoader.from_settings(settings, ledger, SQLCheckpointStore(session))
                results[account_number] = await SyncRunner(fio, loader).run(account_number, token)
        except Exception as e:
            logger.error(f"Sync failed for {account_number}: {str(e)}")
            results[account_number] = {"status": "failed", "error": str(e)}

    return results

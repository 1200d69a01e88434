"""
Checkpoint store: last synchronized transaction id per account.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from sqlalchemy import select, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import CheckpointError
from models.checkpoint import SyncCheckpoint
import logging

logger = logging.getLogger(__name__)


class CheckpointStore(ABC):
    """Key-value mapping (namespace, account_number) -> last transaction id"""

    @abstractmethod
    async def get(self, namespace: str, account_number: str) -> Optional[int]:
        pass

    @abstractmethod
    async def set(self, namespace: str, account_number: str, transaction_id: int):
        pass


class SQLCheckpointStore(CheckpointStore):
    """
    Checkpoint store backed by the ``sync_checkpoints`` table.

    Writes overwrite the stored value unconditionally and commit
    immediately.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def _get_row(self, namespace: str, account_number: str) -> Optional[SyncCheckpoint]:
        result = await self.db.execute(
            select(SyncCheckpoint).where(
                and_(
                    SyncCheckpoint.namespace == namespace,
                    SyncCheckpoint.account_number == account_number
                )
            )
        )
        return result.scalar_one_or_none()

    async def get(self, namespace: str, account_number: str) -> Optional[int]:
        try:
            checkpoint = await self._get_row(namespace, account_number)
        except SQLAlchemyError as e:
            raise CheckpointError(
                "Failed to read checkpoint",
                context={"namespace": namespace, "account_number": account_number, "operation": "read"},
                original_exception=e
            )

        if checkpoint is None:
            return None
        return checkpoint.last_transaction_id

    async def set(self, namespace: str, account_number: str, transaction_id: int):
        try:
            checkpoint = await self._get_row(namespace, account_number)

            if checkpoint is None:
                checkpoint = SyncCheckpoint(
                    namespace=namespace,
                    account_number=account_number,
                    last_transaction_id=transaction_id
                )
                self.db.add(checkpoint)
            else:
                checkpoint.last_transaction_id = transaction_id
                checkpoint.updated_at = datetime.utcnow()

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise CheckpointError(
                "Failed to write checkpoint",
                context={
                    "namespace": namespace,
                    "account_number": account_number,
                    "checkpoint_value": transaction_id,
                    "operation": "write"
                },
                original_exception=e
            )

        logger.debug(f"Checkpoint {namespace}/{account_number} set to {transaction_id}")

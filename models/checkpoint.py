from sqlalchemy import Column, Integer, String, DateTime, BigInteger, Index
from datetime import datetime
from models.base import Base


class SyncCheckpoint(Base):
    """
    Tracks sync progress per FIO account.

    Purpose:
    - Resume sync from the last synchronized transaction
    - Avoid re-submitting transactions to the ledger

    Design:
    - One row per (namespace, account_number)
    - last_transaction_id is overwritten on every successful batch; the
      table does not enforce monotonicity
    """
    __tablename__ = "sync_checkpoints"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Checkpoint key
    namespace = Column(String(100), nullable=False)
    account_number = Column(String(100), nullable=False)

    # Checkpoint data
    last_transaction_id = Column(BigInteger, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_checkpoint_account", "namespace", "account_number", unique=True),
    )

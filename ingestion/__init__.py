"""
Sync pipeline components moving FIO statements into the core ledger.

Modules:
    http: Request helper translating HTTP outcomes into typed errors
    batching: Sequential batches of concurrently processed items
    checkpoint: Checkpoint store (last synchronized transaction per account)
    runner: Sync orchestrator for one account and for all configured accounts
    scheduler: APScheduler integration for periodic sync

Subpackages:
    extractors: FIO api client with too-early backoff
    transformers: FIO statement -> core transactions and accounts
    loaders: Core ledger client and checkpointing loader

Architecture:
    1. Extract - Move FIO cursor to the checkpoint and download the statement
    2. Transform - Group transfers into transactions, collect counterpart accounts
    3. Load - Create missing accounts, submit transactions in batches and
       advance the checkpoint after each successful batch

Usage:
    from ingestion.extractors.fio_client import FioClient
    from ingestion.loaders.ledger_client import LedgerClient
    from ingestion.loaders.ledger_loader import LedgerLoader
    from ingestion.checkpoint import SQLCheckpointStore
    from ingestion.runner import SyncRunner

Example:
    async with LedgerClient.from_settings(settings) as ledger:
        loader = LedgerLoader.from_settings(settings, ledger, SQLCheckpointStore(session))
        runner = SyncRunner(FioClient.from_settings(settings), loader)
        result = await runner.run("CZ6520100000002800000001", token)

    print(f"Submitted {result['transactions']} transactions")
"""

__all__ = [
    "http",
    "batching",
    "checkpoint",
    "runner",
    "scheduler",
]

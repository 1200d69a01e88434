"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class
    checkpoint: Last synchronized transaction per (namespace, account)

Usage:
    from models.checkpoint import SyncCheckpoint
"""

__all__ = [
    "base",
    "checkpoint",
]

"""
Core utilities and configuration for the FIO sync service.

Modules:
    config: Settings loaded from environment variables / .env
    database: Async engine and session factory for the checkpoint store
    exceptions: Typed exception hierarchy for transport and sync errors
    logging: Logging configuration

Usage:
    from core.config import Settings
    from core.database import create_engine, create_session_factory
    from core.exceptions import NotFoundError, RateLimitedError
    from core.logging import setup_logging

Example:
    settings = Settings()
    setup_logging(settings)

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        pass
"""

__all__ = [
    "config",
    "database",
    "exceptions",
    "logging",
]

"""
Core ledger api client
"""

import httpx
import logging
from typing import Optional

from core.config import Settings
from ingestion.http import request
from schemas.core import CoreAccount, CoreTransaction

logger = logging.getLogger(__name__)


class LedgerClient:
    """
    Thin adapter over the core ledger REST api of one tenant.

    Use as async context manager; the underlying HTTP client is shared by
    all calls made inside the block. Errors are raised as NotFoundError,
    RateLimitedError or TransportError.
    """

    def __init__(
        self,
        base_url: str,
        tenant: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not tenant:
            raise ValueError("When creating LedgerClient you have to provide tenant name")

        self.tenant = tenant
        self.api_url = f"{base_url.rstrip('/')}/v1/{tenant}/core"
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "LedgerClient":
        return cls(
            base_url=settings.LEDGER_URL,
            tenant=settings.TENANT,
            timeout=settings.HTTP_TIMEOUT,
            **kwargs
        )

    async def __aenter__(self) -> "LedgerClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self._client.aclose()
        self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("LedgerClient must be used inside 'async with'")
        return self._client

    async def get_account(self, account_number: str):
        """Check the account exists; raises NotFoundError when it does not."""
        await request(self.client, "GET", f"{self.api_url}/account/{account_number}")

    async def create_account(self, account: CoreAccount):
        await request(
            self.client, "PUT", f"{self.api_url}/account/",
            json=account.model_dump(by_alias=True)
        )

    async def create_transaction(self, transaction: CoreTransaction):
        await request(
            self.client, "PUT", f"{self.api_url}/transaction",
            json=transaction.model_dump(by_alias=True)
        )

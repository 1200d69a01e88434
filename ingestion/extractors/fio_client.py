"""
FIO bank api client.

FIO keeps a server-side cursor per token: a statement request returns
everything after the cursor. The cursor is moved explicitly before each
download, either to a transaction id or to a date. FIO also allows one
download per token every 20 seconds and answers earlier calls with
HTTP 409.
"""

import httpx
import asyncio
from typing import Any, Dict, Optional
from pydantic import ValidationError

from core.config import Settings
from core.exceptions import BankFeedError, RateLimitedError, SyncException
from ingestion.http import request
from schemas.fio import FioAccountStatement
import logging

logger = logging.getLogger(__name__)

EPOCH_DATE = "1900-01-01"
REDACTED = "***"


class FioClient:
    """
    Download account statements from the FIO api.

    Attributes:
        api_url: Base URL of the FIO REST api
        retry_wait: Seconds to wait after a "too early" answer (default: 20)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_url: str,
        retry_wait: float = 20.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_url = api_url.rstrip("/")
        self.retry_wait = retry_wait
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "FioClient":
        return cls(
            api_url=settings.FIO_API_URL,
            retry_wait=settings.FIO_RETRY_WAIT_SECONDS,
            timeout=settings.HTTP_TIMEOUT,
            **kwargs
        )

    async def get_account_statement(
        self,
        token: str,
        from_transaction_id: Optional[int] = None,
        allow_retry: bool = True
    ) -> FioAccountStatement:
        """
        Fetch statement of transfers newer than the given transaction.

        Args:
            token: FIO api token of the account
            from_transaction_id: Last synchronized transaction, falsy to fetch everything
            allow_retry: Wait and retry once when FIO answers "too early"

        Returns:
            Parsed account statement

        Raises:
            RateLimitedError: FIO still answers "too early" and no retry is left
            BankFeedError: Any other failure
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            await self._set_last_transaction(client, token, from_transaction_id)
            payload = await self._get_last_transactions(client, token, allow_retry)

        try:
            statement = FioAccountStatement.model_validate(payload)
        except ValidationError as e:
            raise BankFeedError(
                "FIO api returned malformed account statement",
                context={"url": self._url("/last/{token}/transactions.json", REDACTED)},
                original_exception=e
            )

        logger.info(f"Loaded FIO account statement for account {statement.iban}")
        return statement

    async def _set_last_transaction(
        self,
        client: httpx.AsyncClient,
        token: str,
        from_transaction_id: Optional[int]
    ):
        if not from_transaction_id:
            path = "/set-last-date/{token}/" + EPOCH_DATE + "/"
        else:
            path = "/set-last-id/{token}/" + str(from_transaction_id) + "/"

        try:
            await request(
                client, "GET", self._url(path, token), display_url=self._url(path, REDACTED)
            )
        except SyncException as e:
            raise BankFeedError(
                "Request to FIO api failed",
                context={"operation": "set_last_transaction", "url": self._url(path, REDACTED)},
                original_exception=e
            )

    async def _get_last_transactions(
        self,
        client: httpx.AsyncClient,
        token: str,
        allow_retry: bool
    ) -> Dict[str, Any]:
        path = "/last/{token}/transactions.json"

        try:
            response = await request(
                client, "GET", self._url(path, token), display_url=self._url(path, REDACTED)
            )
        except RateLimitedError as e:
            if allow_retry:
                logger.warning(
                    f"Request to FIO for transactions is too early - waiting {self.retry_wait:g} seconds ..."
                )
                await asyncio.sleep(self.retry_wait)
                return await self._get_last_transactions(client, token, False)

            raise RateLimitedError(
                "FIO transaction api unavailable, you have to wait 20 seconds between calls",
                context={
                    "operation": "get_last_transactions",
                    "url": self._url(path, REDACTED),
                    "retry_wait": self.retry_wait
                },
                original_exception=e,
                retry_after=self.retry_wait
            )
        except SyncException as e:
            raise BankFeedError(
                "Request to FIO api failed",
                context={"operation": "get_last_transactions", "url": self._url(path, REDACTED)},
                original_exception=e
            )

        try:
            return response.json()
        except ValueError as e:
            raise BankFeedError(
                "Failed to parse JSON response",
                context={
                    "url": self._url(path, REDACTED),
                    "response_body": response.text[:500]
                },
                original_exception=e
            )

    def _url(self, path: str, token: str) -> str:
        return self.api_url + path.format(token=token)

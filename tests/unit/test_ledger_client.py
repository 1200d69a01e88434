"""
Unit tests for the core ledger client
"""

import json
import httpx
import pytest
from core.exceptions import NotFoundError, RateLimitedError, TransportError
from ingestion.loaders.ledger_client import LedgerClient
from schemas.core import CoreAccount, CoreTransaction, CoreTransfer


def _client(handler, requests=None):
    def record(request):
        if requests is not None:
            requests.append(request)
        return handler(request)

    return LedgerClient(
        base_url="http://ledger.test/",
        tenant="acme",
        transport=httpx.MockTransport(record),
    )


class TestLedgerClient:

    def test_requires_tenant(self):
        with pytest.raises(ValueError):
            LedgerClient(base_url="http://ledger.test", tenant="")

    def test_must_be_used_as_context_manager(self):
        client = LedgerClient(base_url="http://ledger.test", tenant="acme")

        with pytest.raises(RuntimeError):
            client.client

    @pytest.mark.asyncio
    async def test_get_account(self):
        requests = []
        client = _client(lambda r: httpx.Response(200, json={"accountNumber": "CZ001"}), requests)

        async with client as ledger:
            await ledger.get_account("CZ001")

        assert requests[0].method == "GET"
        assert str(requests[0].url) == "http://ledger.test/v1/acme/core/account/CZ001"

    @pytest.mark.asyncio
    async def test_get_account_ignores_non_json_body(self):
        async with _client(lambda r: httpx.Response(200, text="OK")) as ledger:
            assert await ledger.get_account("CZ001") is None

    @pytest.mark.asyncio
    async def test_get_missing_account_raises_not_found(self):
        async with _client(lambda r: httpx.Response(404)) as ledger:
            with pytest.raises(NotFoundError) as exc_info:
                await ledger.get_account("CZ404")

        assert exc_info.value.context["status_code"] == 404

    @pytest.mark.asyncio
    async def test_create_account_sends_ledger_field_names(self):
        requests = []

        async with _client(lambda r: httpx.Response(200), requests) as ledger:
            await ledger.create_account(CoreAccount(account_number="CZ001", currency="CZK"))

        assert requests[0].method == "PUT"
        assert str(requests[0].url) == "http://ledger.test/v1/acme/core/account/"
        assert json.loads(requests[0].content) == {
            "accountNumber": "CZ001",
            "currency": "CZK",
            "isBalanceCheck": False,
        }

    @pytest.mark.asyncio
    async def test_create_transaction(self):
        requests = []
        transaction = CoreTransaction(id="5", transfers=[CoreTransfer(
            id="99",
            value_date="2023-01-04T23:00:00.000Z",
            credit="FIO",
            debit="CZ001",
            amount="150",
            currency="CZK",
        )])

        async with _client(lambda r: httpx.Response(200), requests) as ledger:
            await ledger.create_transaction(transaction)

        body = json.loads(requests[0].content)
        assert str(requests[0].url) == "http://ledger.test/v1/acme/core/transaction"
        assert body["id"] == "5"
        assert body["blame"] == "fio-sync"
        assert body["transfers"][0]["valueDate"] == "2023-01-04T23:00:00.000Z"

    @pytest.mark.asyncio
    async def test_server_error_raises_transport_error(self):
        async with _client(lambda r: httpx.Response(500, text="internal")) as ledger:
            with pytest.raises(TransportError) as exc_info:
                await ledger.create_transaction(CoreTransaction(id="1"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.context["response_body"] == "internal"

    @pytest.mark.asyncio
    async def test_conflict_raises_rate_limited(self):
        async with _client(lambda r: httpx.Response(409)) as ledger:
            with pytest.raises(RateLimitedError):
                await ledger.get_account("CZ001")

    @pytest.mark.asyncio
    async def test_network_failure_raises_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with _client(refuse) as ledger:
            with pytest.raises(TransportError) as exc_info:
                await ledger.get_account("CZ001")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

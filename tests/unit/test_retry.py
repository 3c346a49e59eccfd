"""
Unit tests for retry module.
"""

import pytest
from unittest.mock import AsyncMock

import httpx

from holidayscout.exceptions import ProviderError
from holidayscout.utils.retry import api_retry


class TestApiRetry:
    """Tests for api_retry decorator."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        call = AsyncMock(return_value="ok")

        @api_retry(max_attempts=3, min_wait_seconds=0, max_wait_seconds=0)
        async def fetch():
            return await call()

        assert await fetch() == "ok"
        assert call.await_count == 1

    @pytest.mark.asyncio
    async def test_network_errors_retried(self):
        call = AsyncMock(side_effect=[httpx.ConnectError("refused"), httpx.ReadTimeout("slow"), "ok"])

        @api_retry(max_attempts=3, min_wait_seconds=0, max_wait_seconds=0)
        async def fetch():
            return await call()

        assert await fetch() == "ok"
        assert call.await_count == 3

    @pytest.mark.asyncio
    async def test_last_exception_reraised(self):
        call = AsyncMock(side_effect=ConnectionError("down"))

        @api_retry(max_attempts=2, min_wait_seconds=0, max_wait_seconds=0)
        async def fetch():
            return await call()

        with pytest.raises(ConnectionError):
            await fetch()
        assert call.await_count == 2

    @pytest.mark.asyncio
    async def test_provider_errors_not_retried(self):
        call = AsyncMock(side_effect=ProviderError("amadeus", "rate limit exceeded", 429))

        @api_retry(max_attempts=3, min_wait_seconds=0, max_wait_seconds=0)
        async def fetch():
            return await call()

        with pytest.raises(ProviderError):
            await fetch()
        assert call.await_count == 1

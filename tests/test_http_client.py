"""
HTTP Client Unit Tests

Tests for the shared outbound client used by the email dispatcher.
"""

from unittest.mock import MagicMock, patch

import pytest


class TestHttpClient:
    """Tests for the HTTP client module."""

    def test_get_http_client_returns_singleton(self):
        """Verify that get_http_client returns the same instance."""
        with patch("studizen.core.http_client._http_client", None):
            from studizen.core.http_client import get_http_client

            client1 = get_http_client()
            client2 = get_http_client()

            assert client1 is client2

    def test_http_client_pool_and_timeout(self):
        """Verify pool limits and timeout are passed to httpx."""
        with patch("studizen.core.http_client._http_client", None), \
                patch("studizen.core.http_client.httpx.AsyncClient") as client_cls:
            from studizen.core.http_client import get_http_client

            get_http_client()

            kwargs = client_cls.call_args.kwargs
            assert kwargs["limits"].max_connections == 50
            assert kwargs["limits"].max_keepalive_connections == 10
            assert kwargs["timeout"].connect == 15.0

    @pytest.mark.asyncio
    async def test_close_resets_client(self):
        """Verify closing drops the shared instance."""
        import studizen.core.http_client as http_client

        fake = MagicMock()

        async def _aclose():
            return None

        fake.aclose = _aclose
        with patch.object(http_client, "_http_client", fake):
            await http_client.close_http_client()

            assert http_client._http_client is None

"""Unit tests for utils.protocol module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from threadbrotr.models import Relay
from threadbrotr.utils.protocol import connect_client, create_client, fetch_events, shutdown_client


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.add_relay = AsyncMock()
    client.try_connect = AsyncMock()
    client.fetch_events = AsyncMock()
    client.shutdown = AsyncMock()
    return client


@pytest.fixture
def mock_builder(mock_client: MagicMock):
    with patch("threadbrotr.utils.protocol.ClientBuilder") as builder_cls:
        builder = builder_cls.return_value
        builder.opts.return_value = builder
        builder.build.return_value = mock_client
        yield builder


class TestCreateClient:
    async def test_plain(self, mock_builder: MagicMock, mock_client: MagicMock):
        client = await create_client()
        assert client is mock_client
        mock_builder.opts.assert_not_called()

    async def test_proxy_with_ip(self, mock_builder: MagicMock):
        with (
            patch("threadbrotr.utils.protocol.ConnectionMode") as mode,
            patch("threadbrotr.utils.protocol.Connection"),
            patch("threadbrotr.utils.protocol.ClientOptions"),
        ):
            await create_client("socks5://127.0.0.1:9050")
        mode.PROXY.assert_called_once_with("127.0.0.1", 9050)
        mock_builder.opts.assert_called_once()

    async def test_proxy_hostname_resolved(self, mock_builder: MagicMock):
        with (
            patch("threadbrotr.utils.protocol.ConnectionMode") as mode,
            patch("threadbrotr.utils.protocol.Connection"),
            patch("threadbrotr.utils.protocol.ClientOptions"),
            patch("threadbrotr.utils.protocol.socket.gethostbyname", return_value="172.20.0.5") as resolve,
        ):
            await create_client("socks5://tor:9050")
        resolve.assert_called_once_with("tor")
        mode.PROXY.assert_called_once_with("172.20.0.5", 9050)


class TestConnectClient:
    async def test_success(self, mock_builder: MagicMock, mock_client: MagicMock):
        with patch("threadbrotr.utils.protocol.RelayUrl") as relay_url_cls:
            url = relay_url_cls.parse.return_value
            mock_client.try_connect.return_value = MagicMock(success=[url], failed={})
            client = await connect_client(Relay("wss://nos.lol"), timeout=3.0)

        assert client is mock_client
        relay_url_cls.parse.assert_called_once_with("wss://nos.lol")
        mock_client.add_relay.assert_awaited_once_with(url)
        mock_client.shutdown.assert_not_awaited()

    async def test_failure_raises_os_error(self, mock_builder: MagicMock, mock_client: MagicMock):
        with patch("threadbrotr.utils.protocol.RelayUrl") as relay_url_cls:
            url = relay_url_cls.parse.return_value
            mock_client.try_connect.return_value = MagicMock(success=[], failed={url: "refused"})
            with pytest.raises(OSError, match="refused"):
                await connect_client(Relay("wss://nos.lol"))
        mock_client.shutdown.assert_awaited_once()

    async def test_overlay_requires_proxy(self, mock_builder: MagicMock):
        with pytest.raises(ValueError, match="proxy_url required"):
            await connect_client(Relay("ws://abcdefghij234567.onion"))


class TestFetchEvents:
    async def test_returns_list(self, mock_client: MagicMock):
        events = [MagicMock(), MagicMock()]
        mock_client.fetch_events.return_value = MagicMock(to_vec=MagicMock(return_value=events))
        event_filter = MagicMock()

        assert await fetch_events(mock_client, event_filter, timeout=2.0) == events
        args = mock_client.fetch_events.await_args.args
        assert args[0] is event_filter
        assert args[1].total_seconds() == 2.0


class TestShutdownClient:
    async def test_suppresses_ffi_errors(self, mock_client: MagicMock):
        mock_client.shutdown.side_effect = RuntimeError("ffi")
        await shutdown_client(mock_client)
        mock_client.shutdown.assert_awaited_once()

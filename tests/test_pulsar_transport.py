"""Unit tests for the Pulsar transport (using mocks)."""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from pulse.errors import PublishError, PublishTimeoutError, TransportConnectionError
from pulse.transports.pulsar import PulsarTransport

Result = SimpleNamespace(
    Ok="Ok",
    Timeout="Timeout",
    ConnectError="ConnectError",
    AlreadyClosed="AlreadyClosed",
    ProducerQueueIsFull="ProducerQueueIsFull",
)


def _fake_pulsar(client_cls=None) -> dict:
    return {"pulsar": MagicMock(Client=client_cls or MagicMock(), Result=Result)}


def _producer_replying(result) -> MagicMock:
    producer = MagicMock()
    producer.send_async.side_effect = lambda payload, callback: callback(result, "msg-id")
    return producer


def _connected_transport(producer: MagicMock) -> PulsarTransport:
    transport = PulsarTransport("pulsar://localhost:6650")
    transport.client = MagicMock()
    transport.client.create_producer.return_value = producer
    return transport


class TestPulsarTransportConnect:
    def test_connect_creates_client(self):
        client_cls = MagicMock()
        with patch.dict("sys.modules", _fake_pulsar(client_cls)):
            transport = PulsarTransport("pulsar://localhost:6650", {"operation_timeout_seconds": 5})
            transport.connect()

        client_cls.assert_called_once_with("pulsar://localhost:6650", operation_timeout_seconds=5)
        assert transport.client is client_cls.return_value

    def test_connect_maps_client_errors(self):
        client_cls = MagicMock(side_effect=Exception("bad url"))
        with patch.dict("sys.modules", _fake_pulsar(client_cls)):
            with pytest.raises(TransportConnectionError):
                PulsarTransport("pulsar://nowhere").connect()

    def test_connect_raises_on_missing_package(self):
        with patch.dict("sys.modules", {"pulsar": None}):
            with pytest.raises(TransportConnectionError):
                PulsarTransport("pulsar://localhost:6650").connect()


class TestPulsarTransportPublish:
    def test_publish_sends_and_caches_producer(self):
        producer = _producer_replying(Result.Ok)
        transport = _connected_transport(producer)

        with patch.dict("sys.modules", _fake_pulsar()):
            transport.publish("orders", b"a")
            transport.publish("orders", b"b")

        transport.client.create_producer.assert_called_once_with("orders")
        assert producer.send_async.call_count == 2

    @pytest.mark.parametrize("result, expected", [
        (Result.Timeout, PublishTimeoutError),
        (Result.ConnectError, TransportConnectionError),
        (Result.AlreadyClosed, TransportConnectionError),
        (Result.ProducerQueueIsFull, PublishError),
    ])
    def test_publish_maps_results(self, result, expected):
        transport = _connected_transport(_producer_replying(result))
        with patch.dict("sys.modules", _fake_pulsar()):
            with pytest.raises(expected):
                transport.publish("orders", b"a")

    def test_publish_times_out_without_callback(self):
        transport = _connected_transport(MagicMock())
        with patch.dict("sys.modules", _fake_pulsar()):
            with pytest.raises(PublishTimeoutError) as exc_info:
                transport.publish("orders", b"a", timeout=0.01)
        assert exc_info.value.delivered is None

    def test_publish_raises_when_not_connected(self):
        with pytest.raises(TransportConnectionError, match="not connected"):
            PulsarTransport("pulsar://localhost:6650").publish("t", b"x")


class TestPulsarTransportClose:
    def test_close_closes_producers_and_client(self):
        producer = MagicMock()
        transport = _connected_transport(producer)
        client = transport.client
        transport.producers = {"orders": producer}

        transport.close()

        producer.flush.assert_called_once()
        producer.close.assert_called_once()
        client.close.assert_called_once()
        assert transport.client is None

    def test_close_is_safe_when_not_connected(self):
        PulsarTransport("pulsar://localhost:6650").close()  # should not raise

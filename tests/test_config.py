"""Unit tests for configuration loading and the transport factory"""
import pytest

from pulse.config.models import TransportConfig
from pulse.errors import UnknownTransportError
from pulse.transports.eventhubs import EventHubsTransport
from pulse.transports.factory import create_async_transport, create_transport
from pulse.transports.google_pubsub import GooglePubSubTransport
from pulse.transports.kafka import KafkaTransport
from pulse.transports.mock import AsyncMockTransport, MockTransport
from pulse.transports.nats import NatsTransport
from pulse.transports.pulsar import PulsarTransport


class TestTransportConfig:
    def test_scheme(self):
        assert TransportConfig(url="Kafka://localhost:9092").scheme == "kafka"

    def test_from_dict(self):
        config = TransportConfig.from_dict({"url": "nats://localhost:4222", "options": {"name": "x"}})
        assert config.url == "nats://localhost:4222"
        assert config.options == {"name": "x"}

    def test_from_dict_without_options(self):
        assert TransportConfig.from_dict({"url": "mock://"}).options == {}

    def test_from_dict_requires_url(self):
        with pytest.raises(ValueError, match="url"):
            TransportConfig.from_dict({"options": {}})

    def test_from_dict_rejects_non_mapping_options(self):
        with pytest.raises(ValueError):
            TransportConfig.from_dict({"url": "mock://", "options": ["a", "b"]})

    def test_from_yaml_with_transport_key(self, tmp_path):
        path = tmp_path / "pulse.yaml"
        path.write_text(
            "transport:\n"
            "  url: kafka://broker:9092\n"
            "  options:\n"
            "    acks: all\n"
            "    linger_ms: 5\n"
        )

        config = TransportConfig.from_yaml(str(path))

        assert config.url == "kafka://broker:9092"
        assert config.options == {"acks": "all", "linger_ms": 5}

    def test_from_yaml_top_level(self, tmp_path):
        path = tmp_path / "pulse.yaml"
        path.write_text("url: mock://\n")
        assert TransportConfig.from_yaml(str(path)).url == "mock://"


class TestTransportFactory:
    @pytest.mark.parametrize("url, expected", [
        ("mock://", MockTransport),
        ("kafka://localhost:9092", KafkaTransport),
        ("pulsar://localhost:6650", PulsarTransport),
        ("pulsar+ssl://localhost:6651", PulsarTransport),
        ("eventhubs://", EventHubsTransport),
        ("gcppubsub://project", GooglePubSubTransport),
    ])
    def test_create_transport(self, url, expected):
        transport = create_transport(TransportConfig(url=url))
        assert isinstance(transport, expected)
        assert transport.url == url

    @pytest.mark.parametrize("url, expected", [
        ("mock://", AsyncMockTransport),
        ("nats://localhost:4222", NatsTransport),
        ("tls://localhost:4222", NatsTransport),
    ])
    def test_create_async_transport(self, url, expected):
        assert isinstance(create_async_transport(TransportConfig(url=url)), expected)

    def test_options_are_passed_through(self):
        transport = create_transport(TransportConfig(url="mock://", options={"k": "v"}))
        assert transport.options == {"k": "v"}

    def test_unknown_scheme(self):
        with pytest.raises(UnknownTransportError):
            create_transport(TransportConfig(url="amqp://localhost"))

    def test_sync_only_scheme_has_no_async_transport(self):
        with pytest.raises(UnknownTransportError):
            create_async_transport(TransportConfig(url="kafka://localhost:9092"))

"""Factory for creating transports from configuration"""
import logging

from pulse.config.models import TransportConfig
from pulse.core.interfaces import AsyncTransport, Transport
from pulse.errors import UnknownTransportError
from pulse.transports.eventhubs import EventHubsTransport
from pulse.transports.google_pubsub import GooglePubSubTransport
from pulse.transports.kafka import KafkaTransport
from pulse.transports.mock import AsyncMockTransport, MockTransport
from pulse.transports.nats import NatsTransport
from pulse.transports.pulsar import PulsarTransport

logger = logging.getLogger(__name__)

TRANSPORTS = {
    'mock': MockTransport,
    'kafka': KafkaTransport,
    'pulsar': PulsarTransport,
    'pulsar+ssl': PulsarTransport,
    'eventhubs': EventHubsTransport,
    'gcppubsub': GooglePubSubTransport,
}

ASYNC_TRANSPORTS = {
    'mock': AsyncMockTransport,
    'nats': NatsTransport,
    'tls': NatsTransport,
}


def create_transport(config: TransportConfig) -> Transport:
    """Create an unconnected transport based on the URL scheme"""
    transport_class = TRANSPORTS.get(config.scheme)
    if not transport_class:
        raise UnknownTransportError(f"Unknown transport scheme: {config.scheme!r}")

    logger.info(f"Creating {config.scheme} transport")
    return transport_class(config.url, config.options)


def create_async_transport(config: TransportConfig) -> AsyncTransport:
    """Create an unconnected asyncio transport based on the URL scheme"""
    transport_class = ASYNC_TRANSPORTS.get(config.scheme)
    if not transport_class:
        raise UnknownTransportError(f"Unknown async transport scheme: {config.scheme!r}")

    logger.info(f"Creating async {config.scheme} transport")
    return transport_class(config.url, config.options)

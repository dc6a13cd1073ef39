"""Pulsar transport"""
import logging
import threading
from typing import Optional

from pulse.core.interfaces import Transport
from pulse.errors import PublishError, PublishTimeoutError, TransportConnectionError

logger = logging.getLogger(__name__)


class PulsarTransport(Transport):
    """Pulsar transport.

    The URL (``pulsar://host:6650`` or ``pulsar+ssl://...``) is the service
    URL; options are passed to ``pulsar.Client``. One producer is created per
    destination topic.
    """

    thread_safe = True

    def __init__(self, url: str, options: Optional[dict] = None):
        self.url = url
        self.options = dict(options or {})
        self.client = None
        self.producers = {}  # topic -> producer
        self._producers_lock = threading.Lock()

    def connect(self) -> None:
        """Establish connection to Pulsar"""
        try:
            import pulsar
        except ImportError as e:
            logger.error("pulsar-client package not installed. Install with: pip install pulsar-client")
            raise TransportConnectionError("pulsar-client package not installed") from e

        try:
            self.client = pulsar.Client(self.url, **self.options)
        except Exception as e:
            raise TransportConnectionError(f"Cannot connect to Pulsar at {self.url}: {e}") from e
        logger.info("Connected to Pulsar transport")

    def _producer(self, topic: str):
        with self._producers_lock:
            if topic not in self.producers:
                try:
                    self.producers[topic] = self.client.create_producer(topic)
                except Exception as e:
                    raise TransportConnectionError(f"Cannot create Pulsar producer for {topic}: {e}") from e
            return self.producers[topic]

    def publish(self, destination: str, payload: bytes, timeout: Optional[float] = None) -> None:
        """Publish bytes to a Pulsar topic, waiting at most ``timeout`` seconds"""
        if not self.client:
            raise TransportConnectionError("Client not connected")

        import pulsar

        producer = self._producer(destination)
        done = threading.Event()
        outcome = {}

        def _on_sent(result, message_id):
            outcome['result'] = result
            done.set()

        producer.send_async(payload, _on_sent)

        if not done.wait(timeout):
            raise PublishTimeoutError(f"Pulsar publish to {destination} timed out", delivered=None)

        result = outcome['result']
        if result == pulsar.Result.Ok:
            return
        if result == pulsar.Result.Timeout:
            raise PublishTimeoutError(f"Pulsar publish to {destination} timed out", delivered=False)
        if result in (pulsar.Result.ConnectError, pulsar.Result.AlreadyClosed):
            raise TransportConnectionError(f"Lost connection to Pulsar: {result}")
        raise PublishError(f"Pulsar rejected publish to {destination}: {result}")

    def close(self) -> None:
        """Close Pulsar connection"""
        for producer in self.producers.values():
            producer.flush()
            producer.close()
        self.producers = {}
        if self.client:
            self.client.close()
            self.client = None
            logger.info("Pulsar transport closed")

"""Kafka transport"""
import logging
from typing import Optional
from urllib.parse import urlsplit

from pulse.core.interfaces import Transport
from pulse.errors import PublishError, PublishTimeoutError, TransportConnectionError

logger = logging.getLogger(__name__)


class KafkaTransport(Transport):
    """Kafka transport.

    ``kafka://host1:9092,host2:9092`` sets the bootstrap servers; options are
    passed to ``KafkaProducer``. ``KafkaProducer`` is safe to share between
    threads.
    """

    thread_safe = True

    def __init__(self, url: str, options: Optional[dict] = None):
        self.url = url
        self.options = dict(options or {})
        self.producer = None

    @property
    def bootstrap_servers(self) -> list[str]:
        netloc = urlsplit(self.url).netloc
        return [server for server in netloc.split(',') if server]

    def connect(self) -> None:
        """Establish connection to Kafka"""
        try:
            from kafka import KafkaProducer
            from kafka.errors import KafkaError
        except ImportError as e:
            logger.error("kafka-python package not installed. Install with: pip install kafka-python")
            raise TransportConnectionError("kafka-python package not installed") from e

        config = {'bootstrap_servers': self.bootstrap_servers, **self.options}
        try:
            self.producer = KafkaProducer(**config)
        except KafkaError as e:
            raise TransportConnectionError(f"Cannot connect to Kafka at {self.url}: {e}") from e
        logger.info("Connected to Kafka transport")

    def publish(self, destination: str, payload: bytes, timeout: Optional[float] = None) -> None:
        """Publish bytes to a Kafka topic and wait for the broker acknowledgement"""
        if not self.producer:
            raise TransportConnectionError("Producer not connected")

        from kafka.errors import KafkaConnectionError, KafkaError, KafkaTimeoutError

        try:
            future = self.producer.send(destination, value=payload)
            future.get(timeout=timeout)
        except KafkaTimeoutError as e:
            raise PublishTimeoutError(f"Kafka publish to {destination} timed out: {e}") from e
        except KafkaConnectionError as e:
            raise TransportConnectionError(f"Lost connection to Kafka: {e}") from e
        except KafkaError as e:
            raise PublishError(f"Kafka rejected publish to {destination}: {e}") from e

    def close(self) -> None:
        """Close Kafka connection"""
        if self.producer:
            self.producer.flush()
            self.producer.close()
            self.producer = None
            logger.info("Kafka transport closed")

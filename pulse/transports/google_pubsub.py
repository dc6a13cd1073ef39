"""Google Cloud Pub/Sub transport"""
import concurrent.futures
import logging
from typing import Optional
from urllib.parse import urlsplit

from pulse.core.interfaces import Transport
from pulse.errors import PublishError, PublishTimeoutError, TransportConnectionError

logger = logging.getLogger(__name__)


class GooglePubSubTransport(Transport):
    """Google Cloud Pub/Sub transport.

    ``gcppubsub://<project-id>`` selects the project; options are passed to
    ``PublisherClient``. The publisher client is thread-safe.
    """

    thread_safe = True

    def __init__(self, url: str, options: Optional[dict] = None):
        self.url = url
        self.options = dict(options or {})
        project_id = self.options.pop('project_id', None)
        self.project_id = urlsplit(url).netloc or project_id
        self.publisher = None
        self.topic_paths = {}

    def connect(self) -> None:
        """Establish connection to Google Pub/Sub"""
        if not self.project_id:
            raise TransportConnectionError(f"No project id in {self.url}")
        try:
            from google.cloud import pubsub_v1
        except ImportError as e:
            logger.error("google-cloud-pubsub package not installed. Install with: pip install google-cloud-pubsub")
            raise TransportConnectionError("google-cloud-pubsub package not installed") from e

        try:
            self.publisher = pubsub_v1.PublisherClient(**self.options)
        except Exception as e:
            raise TransportConnectionError(f"Cannot create Pub/Sub publisher: {e}") from e
        logger.info("Connected to Google Pub/Sub transport")

    def publish(self, destination: str, payload: bytes, timeout: Optional[float] = None) -> None:
        """Publish bytes to a Pub/Sub topic and wait for the server-assigned id"""
        if not self.publisher:
            raise TransportConnectionError("Publisher not connected")

        # Get or create topic path
        if destination not in self.topic_paths:
            self.topic_paths[destination] = self.publisher.topic_path(self.project_id, destination)

        future = self.publisher.publish(self.topic_paths[destination], payload)
        try:
            future.result(timeout=timeout)
        except concurrent.futures.TimeoutError as e:
            raise PublishTimeoutError(f"Pub/Sub publish to {destination} timed out", delivered=None) from e
        except Exception as e:
            raise self._translate_error(destination, e) from e

    @staticmethod
    def _translate_error(destination: str, error: Exception) -> Exception:
        from google.api_core import exceptions as api_exceptions

        if isinstance(error, api_exceptions.DeadlineExceeded):
            return PublishTimeoutError(f"Pub/Sub publish to {destination} timed out: {error}")
        if isinstance(error, api_exceptions.ServiceUnavailable):
            return TransportConnectionError(f"Pub/Sub unavailable: {error}")
        return PublishError(f"Pub/Sub rejected publish to {destination}: {error}")

    def close(self) -> None:
        """Close Google Pub/Sub connection"""
        if self.publisher:
            self.publisher.stop()
            self.publisher = None
            logger.info("Google Pub/Sub transport closed")

"""Azure Event Hubs transport"""
import logging
from typing import Optional

from pulse.core.interfaces import Transport
from pulse.errors import PublishError, PublishTimeoutError, TransportConnectionError

logger = logging.getLogger(__name__)


class EventHubsTransport(Transport):
    """Azure Event Hubs transport.

    The ``connection_string`` option is required; the destination names the
    event hub, with one producer client per hub. Remaining options are passed
    to ``EventHubProducerClient.from_connection_string``.

    With an ``eventhub_name`` option, :meth:`connect` opens that hub's client
    and fetches its properties, so bad credentials or an unreachable namespace
    fail at connect time. Without it nothing is contacted until the first
    publish, which then raises :class:`TransportConnectionError`.
    """

    def __init__(self, url: str, options: Optional[dict] = None):
        self.url = url
        self.options = dict(options or {})
        self.connection_string = self.options.pop('connection_string', None)
        self.eventhub_name = self.options.pop('eventhub_name', None)
        self.clients = {}  # event hub -> producer client
        self._client_class = None

    def connect(self) -> None:
        """Prepare the Event Hubs producer and check the configured hub, if any"""
        if not self.connection_string:
            raise TransportConnectionError("Event Hubs transport requires a 'connection_string' option")
        try:
            from azure.eventhub import EventHubProducerClient
        except ImportError as e:
            logger.error("azure-eventhub package not installed. Install with: pip install azure-eventhub")
            raise TransportConnectionError("azure-eventhub package not installed") from e

        self._client_class = EventHubProducerClient
        if self.eventhub_name:
            try:
                self._client(self.eventhub_name).get_eventhub_properties()
            except TransportConnectionError:
                self.close()
                raise
            except Exception as e:
                self.close()
                raise TransportConnectionError(f"Cannot reach event hub {self.eventhub_name}: {e}") from e
        logger.info("Connected to Event Hubs transport")

    def _client(self, eventhub_name: str):
        if eventhub_name not in self.clients:
            try:
                self.clients[eventhub_name] = self._client_class.from_connection_string(
                    self.connection_string,
                    eventhub_name=eventhub_name,
                    **self.options
                )
            except Exception as e:
                raise TransportConnectionError(f"Cannot open Event Hubs client for {eventhub_name}: {e}") from e
        return self.clients[eventhub_name]

    def publish(self, destination: str, payload: bytes, timeout: Optional[float] = None) -> None:
        """Publish bytes to an event hub as a single-event batch."""
        if not self._client_class:
            raise TransportConnectionError("Client not connected")

        from azure.eventhub import EventData
        from azure.eventhub.exceptions import ConnectError, EventHubError, OperationTimeoutError

        client = self._client(destination)
        try:
            event_batch = client.create_batch()
            event_batch.add(EventData(payload))
            client.send_batch(event_batch, timeout=timeout)
        except OperationTimeoutError as e:
            raise PublishTimeoutError(f"Event Hubs publish to {destination} timed out: {e}") from e
        except ConnectError as e:
            raise TransportConnectionError(f"Lost connection to Event Hubs: {e}") from e
        except EventHubError as e:
            raise PublishError(f"Event Hubs rejected publish to {destination}: {e}") from e

    def close(self) -> None:
        """Close Event Hubs connection"""
        for client in self.clients.values():
            client.close()
        if self.clients:
            logger.info("Event Hubs transport closed")
        self.clients = {}
        self._client_class = None

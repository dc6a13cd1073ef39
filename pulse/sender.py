"""Transport-agnostic senders"""
import asyncio
import logging
import threading
from enum import Enum
from typing import Optional, Union

from pulse.config.models import TransportConfig
from pulse.core.codec import Codec
from pulse.core.interfaces import AsyncTransport, Transport
from pulse.core.message import Message
from pulse.errors import ClosedError, PublishTimeoutError
from pulse.metrics.collector import MetricsCollector
from pulse.transports.factory import create_async_transport, create_transport

logger = logging.getLogger(__name__)


class SenderState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class Sender:
    """Publishes messages through a :class:`Transport`.

    A sender given an already-open transport starts ``OPEN`` and never closes
    it. A sender that owns its transport (``owns_transport=True``) starts
    ``UNOPENED``, connects it in :meth:`open` and closes it in :meth:`close`.

    ``send`` may be called from several threads. Publishes are serialised
    unless the transport declares itself ``thread_safe``.
    """

    def __init__(
        self,
        transport: Transport,
        codec: Optional[Codec] = None,
        metrics=None,
        owns_transport: bool = False,
    ):
        self.transport = transport
        self.codec = codec or Codec()
        self.metrics = metrics or MetricsCollector()
        self.owns_transport = owns_transport

        self._state = SenderState.UNOPENED if owns_transport else SenderState.OPEN
        self._state_lock = threading.Lock()
        self._idle = threading.Condition(self._state_lock)
        self._in_flight = 0
        self._publish_lock = None if transport.thread_safe else threading.Lock()

    @property
    def state(self) -> SenderState:
        return self._state

    def open(self) -> 'Sender':
        """Connect the owned transport. Connection errors are raised as-is."""
        with self._state_lock:
            if self._state is SenderState.CLOSED:
                raise ClosedError("Sender is closed")
            if self._state is SenderState.UNOPENED:
                self.transport.connect()
                self._state = SenderState.OPEN
                logger.info("Sender opened")
        return self

    def send(self, message: Message, timeout: Optional[float] = None) -> None:
        """Encode a message and publish it to its topic.

        Raises :class:`ClosedError` unless the sender is open. Transport errors
        propagate unchanged and are not retried; the message is left untouched
        and can be sent again.
        """
        with self._state_lock:
            if self._state is not SenderState.OPEN:
                raise ClosedError(f"Cannot send on a {self._state.value} sender")
            self._in_flight += 1

        try:
            self._send(message, timeout)
        finally:
            with self._state_lock:
                self._in_flight -= 1
                if not self._in_flight:
                    self._idle.notify_all()

    def _send(self, message: Message, timeout: Optional[float]) -> None:
        destination = message.topic
        payload = self.codec.encode(message)

        try:
            if self._publish_lock is not None:
                with self._publish_lock:
                    self.transport.publish(destination, payload, timeout=timeout)
            else:
                self.transport.publish(destination, payload, timeout=timeout)
        except Exception as e:
            logger.warning(f"Failed to send message {message.id} to {destination}: {e}")
            self.metrics.record_error(destination)
            raise

        self.metrics.record_sent(destination, len(payload))
        logger.debug(f"Sent message {message.id} to {destination}: {len(payload)} bytes")

    def close(self) -> None:
        """Close the sender; the transport is closed only if the sender owns it.

        New sends are refused at once. An owned transport is closed after the
        sends already in progress have returned.
        """
        with self._state_lock:
            previous = self._state
            self._state = SenderState.CLOSED
            self._idle.wait_for(lambda: not self._in_flight)

        if previous is SenderState.OPEN and self.owns_transport:
            self.transport.close()
        if previous is not SenderState.CLOSED:
            logger.info("Sender closed")

    def __enter__(self) -> 'Sender':
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class AsyncSender:
    """Asyncio counterpart of :class:`Sender` for :class:`AsyncTransport`.

    ``timeout`` bounds each publish and raises :class:`PublishTimeoutError`
    with ``delivered=None`` because the broker may already have the message.
    Cancellation propagates as the caller's own ``asyncio.CancelledError``;
    it is counted as an error and the delivery outcome is likewise unknown.
    """

    def __init__(
        self,
        transport: AsyncTransport,
        codec: Optional[Codec] = None,
        metrics=None,
        owns_transport: bool = False,
    ):
        self.transport = transport
        self.codec = codec or Codec()
        self.metrics = metrics or MetricsCollector()
        self.owns_transport = owns_transport
        self._state = SenderState.UNOPENED if owns_transport else SenderState.OPEN
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def state(self) -> SenderState:
        return self._state

    async def open(self) -> 'AsyncSender':
        """Connect the owned transport. Connection errors are raised as-is."""
        if self._state is SenderState.CLOSED:
            raise ClosedError("Sender is closed")
        if self._state is SenderState.UNOPENED:
            await self.transport.connect()
            self._state = SenderState.OPEN
            logger.info("Async sender opened")
        return self

    async def send(self, message: Message, timeout: Optional[float] = None) -> None:
        """Encode a message and publish it to its topic"""
        if self._state is not SenderState.OPEN:
            raise ClosedError(f"Cannot send on a {self._state.value} sender")

        self._in_flight += 1
        self._idle.clear()
        try:
            await self._send(message, timeout)
        finally:
            self._in_flight -= 1
            if not self._in_flight:
                self._idle.set()

    async def _send(self, message: Message, timeout: Optional[float]) -> None:
        destination = message.topic
        payload = self.codec.encode(message)

        try:
            if timeout is None:
                await self.transport.publish(destination, payload)
            else:
                await asyncio.wait_for(self.transport.publish(destination, payload), timeout)
        except asyncio.TimeoutError as e:
            self.metrics.record_error(destination)
            if isinstance(e, PublishTimeoutError):
                raise
            raise PublishTimeoutError(
                f"Publish of {message.id} to {destination} timed out after {timeout}s", delivered=None
            ) from e
        except asyncio.CancelledError:
            logger.warning(f"Send of message {message.id} to {destination} canceled, delivery unknown")
            self.metrics.record_error(destination)
            raise
        except Exception as e:
            logger.warning(f"Failed to send message {message.id} to {destination}: {e}")
            self.metrics.record_error(destination)
            raise

        self.metrics.record_sent(destination, len(payload))
        logger.debug(f"Sent message {message.id} to {destination}: {len(payload)} bytes")

    async def close(self) -> None:
        """Close the sender once in-progress sends have finished"""
        previous = self._state
        self._state = SenderState.CLOSED
        await self._idle.wait()

        if previous is SenderState.OPEN and self.owns_transport:
            await self.transport.close()
        if previous is not SenderState.CLOSED:
            logger.info("Async sender closed")

    async def __aenter__(self) -> 'AsyncSender':
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def _transport_config(config: Union[TransportConfig, str], options: Optional[dict]) -> TransportConfig:
    if isinstance(config, TransportConfig):
        return config
    return TransportConfig(url=config, options=dict(options or {}))


def new_sender(
    config: Union[TransportConfig, str],
    options: Optional[dict] = None,
    codec: Optional[Codec] = None,
    metrics=None,
) -> Sender:
    """Open a transport from configuration and return a sender that owns it.

    Raises :class:`TransportConnectionError` if the broker cannot be reached;
    nothing is retried.
    """
    transport = create_transport(_transport_config(config, options))
    return Sender(transport, codec=codec, metrics=metrics, owns_transport=True).open()


async def new_async_sender(
    config: Union[TransportConfig, str],
    options: Optional[dict] = None,
    codec: Optional[Codec] = None,
    metrics=None,
) -> AsyncSender:
    """Asyncio counterpart of :func:`new_sender`"""
    transport = create_async_transport(_transport_config(config, options))
    return await AsyncSender(transport, codec=codec, metrics=metrics, owns_transport=True).open()

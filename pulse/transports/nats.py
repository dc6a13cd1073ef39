"""NATS transport (asyncio)"""
import asyncio
import logging
from typing import Optional

from pulse.core.interfaces import AsyncTransport
from pulse.errors import PublishTimeoutError, TransportConnectionError

logger = logging.getLogger(__name__)


class NatsTransport(AsyncTransport):
    """NATS transport built on nats-py.

    The URL (``nats://host:4222``) is the server; options are passed to
    ``nats.connect``. With the ``flush`` option (default on) every publish
    waits for the server round trip, so connection loss surfaces on the
    publish that hit it.
    """

    def __init__(self, url: str, options: Optional[dict] = None):
        self.url = url
        self.options = dict(options or {})
        self.flush = self.options.pop('flush', True)
        self.nc = None

    async def connect(self) -> None:
        """Establish connection to NATS"""
        try:
            import nats
            from nats import errors
        except ImportError as e:
            logger.error("nats-py package not installed. Install with: pip install nats-py")
            raise TransportConnectionError("nats-py package not installed") from e

        try:
            self.nc = await nats.connect(servers=[self.url], **self.options)
        except (errors.Error, OSError, asyncio.TimeoutError) as e:
            raise TransportConnectionError(f"Cannot connect to NATS at {self.url}: {e}") from e
        logger.info("Connected to NATS transport")

    async def publish(self, destination: str, payload: bytes) -> None:
        """Publish bytes to a NATS subject"""
        if not self.nc:
            raise TransportConnectionError("NATS client not connected")

        from nats import errors

        try:
            await self.nc.publish(destination, payload)
            if self.flush:
                await self.nc.flush()
        except errors.TimeoutError as e:
            raise PublishTimeoutError(f"NATS flush after publish to {destination} timed out", delivered=None) from e
        except (errors.ConnectionClosedError, errors.ConnectionDrainingError,
                errors.ConnectionReconnectingError, errors.StaleConnectionError) as e:
            raise TransportConnectionError(f"Lost connection to NATS: {e}") from e

    async def close(self) -> None:
        """Close NATS connection"""
        if self.nc:
            await self.nc.close()
            self.nc = None
            logger.info("NATS transport closed")

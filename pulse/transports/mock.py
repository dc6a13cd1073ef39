"""Mock transports for testing and development"""
import asyncio
import logging
import threading
from typing import List, Optional

from pulse.core.interfaces import AsyncTransport, Transport
from pulse.errors import TransportConnectionError

logger = logging.getLogger(__name__)


class MockTransport(Transport):
    """In-memory transport that records every publish"""

    thread_safe = True

    def __init__(self, url: str = "mock://", options: Optional[dict] = None):
        self.url = url
        self.options = options or {}
        self._connected = False
        self._lock = threading.Lock()
        self.published: List[tuple[str, bytes]] = []
        self.close_calls = 0
        # Raised from publish when set
        self.fail_with: Optional[Exception] = None

    def connect(self) -> None:
        """Establish connection"""
        if self.options.get('unreachable'):
            raise TransportConnectionError(f"Mock broker at {self.url} is unreachable")
        self._connected = True
        logger.info("Mock transport connected")

    def publish(self, destination: str, payload: bytes, timeout: Optional[float] = None) -> None:
        """Publish a message"""
        if not self._connected:
            raise TransportConnectionError("Mock transport not connected")
        if self.fail_with is not None:
            raise self.fail_with
        with self._lock:
            self.published.append((destination, payload))
        logger.debug(f"Mock published to {destination}: {len(payload)} bytes")

    def close(self) -> None:
        """Close connection"""
        self._connected = False
        self.close_calls += 1
        logger.info("Mock transport closed")


class AsyncMockTransport(AsyncTransport):
    """Async in-memory transport that records every publish"""

    def __init__(self, url: str = "mock://", options: Optional[dict] = None):
        self.url = url
        self.options = options or {}
        self._connected = False
        self.published: List[tuple[str, bytes]] = []
        self.close_calls = 0
        # Seconds each publish takes, to exercise timeouts and cancellation
        self.delay: float = self.options.get('delay', 0.0)
        self.fail_with: Optional[Exception] = None

    async def connect(self) -> None:
        """Establish connection"""
        if self.options.get('unreachable'):
            raise TransportConnectionError(f"Mock broker at {self.url} is unreachable")
        self._connected = True
        logger.info("Async mock transport connected")

    async def publish(self, destination: str, payload: bytes) -> None:
        """Publish a message"""
        if not self._connected:
            raise TransportConnectionError("Async mock transport not connected")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.published.append((destination, payload))
        logger.debug(f"Async mock published to {destination}: {len(payload)} bytes")

    async def close(self) -> None:
        """Close connection"""
        self._connected = False
        self.close_calls += 1
        logger.info("Async mock transport closed")

"""Abstract base classes for transports"""
from abc import ABC, abstractmethod
from typing import Optional


class Transport(ABC):
    """Abstract base class for broker clients a sender publishes through.

    Implementations raise the pulse error taxonomy from ``publish``:
    ``TransportConnectionError`` when the broker is unreachable and
    ``PublishTimeoutError`` when ``timeout`` elapses first.

    ``thread_safe`` tells the sender whether ``publish`` may be called from
    several threads at once; when it is False the sender serialises calls.
    """

    thread_safe = False

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the broker"""
        pass

    @abstractmethod
    def publish(self, destination: str, payload: bytes, timeout: Optional[float] = None) -> None:
        """Publish encoded bytes to a destination"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection to the broker"""
        pass


class AsyncTransport(ABC):
    """Abstract base class for asyncio broker clients.

    Cancelling a ``publish`` coroutine must abort the in-flight publish.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to the broker"""
        pass

    @abstractmethod
    async def publish(self, destination: str, payload: bytes) -> None:
        """Publish encoded bytes to a destination"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection to the broker"""
        pass

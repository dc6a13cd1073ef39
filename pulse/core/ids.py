"""Message identity generators"""
import itertools
import logging
import threading
import uuid
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class IdGenerator(ABC):
    """Abstract base class for message id generators"""

    @abstractmethod
    def next(self) -> str:
        """Return a new, unique id"""
        pass


class UUIDGenerator(IdGenerator):
    """Random UUID4 ids, hex encoded"""

    def next(self) -> str:
        return uuid.uuid4().hex


class NUIDGenerator(IdGenerator):
    """NATS unique ids (22 characters, base62).

    Requires the ``nats-py`` package. Every instance owns its own NUID
    state, so independent generators never share a sequence.
    """

    def __init__(self):
        try:
            from nats.nuid import NUID
        except ImportError:
            logger.error("nats-py package not installed. Install with: pip install nats-py")
            raise

        self._nuid = NUID()
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            return self._nuid.next().decode('ascii')


class SequenceGenerator(IdGenerator):
    """Deterministic ids: ``<prefix>-1``, ``<prefix>-2``, ..."""

    def __init__(self, prefix: str = "msg", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            return f"{self.prefix}-{next(self._counter)}"

"""Core message data structure"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Union

from pulse.core.ids import IdGenerator, UUIDGenerator

logger = logging.getLogger(__name__)

TOPIC_ATTRIBUTE = 'topic'
DEFAULT_TOPIC = 'default'


class Resolver(ABC):
    """Completion capability bound to a received message by the consumer"""

    @abstractmethod
    def resolve(self, message_id: str, ack: bool) -> None:
        """Report the message as processed (ack=True) or rejected (ack=False)"""
        pass


class CallbackResolver(Resolver):
    """Resolver wrapping a plain ``(message_id, ack)`` callable"""

    def __init__(self, callback: Callable[[str, bool], None]):
        self.callback = callback

    def resolve(self, message_id: str, ack: bool) -> None:
        self.callback(message_id, ack)


class Message:
    """Represents a message in the pub-sub system.

    ``id``, ``data``, ``ordering_key`` and ``delivery_attempt`` are fixed at
    construction. ``attributes`` may be extended by the producer before the
    message is sent.

    On the consumer side a :class:`Resolver` is bound to the message and
    exactly one of :meth:`ack` or :meth:`nack` takes effect.
    """

    def __init__(
        self,
        id: str,
        data: bytes,
        ordering_key: str = "",
        attributes: Optional[Dict[str, str]] = None,
        delivery_attempt: Optional[int] = None,
        size: Optional[int] = None,
    ):
        self._id = id
        self._data = bytes(data)
        self._ordering_key = ordering_key or ""
        self.attributes: Dict[str, str] = dict(attributes) if attributes else {}
        self._delivery_attempt = delivery_attempt
        self.size = self._calculate_size() if size is None else size

        self._resolver: Optional[Resolver] = None
        self._resolved = False
        self._lock = threading.Lock()

    @classmethod
    def new(cls, data: bytes, id_generator: Optional[IdGenerator] = None) -> 'Message':
        """Create a message with a fresh id and no ordering key"""
        return cls.new_with_ordering_key(data, "", id_generator)

    @classmethod
    def new_with_ordering_key(
        cls,
        data: bytes,
        key: str,
        id_generator: Optional[IdGenerator] = None,
    ) -> 'Message':
        """Create a message with a fresh id that is consumed in order with its key"""
        generator = id_generator or UUIDGenerator()
        return cls(id=generator.next(), data=data, ordering_key=key)

    @property
    def id(self) -> str:
        return self._id

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def ordering_key(self) -> str:
        return self._ordering_key

    @property
    def delivery_attempt(self) -> Optional[int]:
        """Number of deliveries so far, set by the transport when dead lettering is enabled"""
        return self._delivery_attempt

    @property
    def topic(self) -> str:
        """Destination this message is published to"""
        return self.attributes.get(TOPIC_ATTRIBUTE) or DEFAULT_TOPIC

    def set_topic(self, topic: str) -> 'Message':
        self.attributes[TOPIC_ATTRIBUTE] = topic
        return self

    def get_attribute(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute value by key"""
        return self.attributes.get(key, default)

    def _calculate_size(self) -> int:
        size = len(self._data)
        for k, v in self.attributes.items():
            size += len(k.encode('utf-8')) + len(v.encode('utf-8'))
        if self._ordering_key:
            size += len(self._ordering_key.encode('utf-8'))
        return size

    def bind(self, resolver: Union[Resolver, Callable[[str, bool], None]]) -> 'Message':
        """Bind the completion resolver; done by the consumer framework on delivery"""
        if not isinstance(resolver, Resolver):
            resolver = CallbackResolver(resolver)
        with self._lock:
            self._resolver = resolver
        return self

    @property
    def resolved(self) -> bool:
        with self._lock:
            return self._resolved

    def ack(self) -> None:
        """Indicate successful processing of a received message.

        Calls to ack or nack have no effect after the first one. Calling
        either on a message with no bound resolver does nothing.
        """
        self._done(True)

    def nack(self) -> None:
        """Indicate the message will not or cannot be processed.

        The transport will usually redeliver it sooner than if it were left
        to expire. Same rules as :meth:`ack`.
        """
        self._done(False)

    def _done(self, ack: bool) -> None:
        with self._lock:
            if self._resolved or self._resolver is None:
                return
            self._resolved = True
            resolver = self._resolver

        try:
            resolver.resolve(self._id, ack)
        except Exception as e:
            logger.error(f"Resolver failed for message {self._id} (ack={ack}): {e}", exc_info=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return (
            self._id == other._id
            and self._data == other._data
            and self._ordering_key == other._ordering_key
            and self.attributes == other.attributes
            and self._delivery_attempt == other._delivery_attempt
            and self.size == other.size
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Message(id={self._id!r}, data={self._data!r}, attributes={self.attributes!r}, "
            f"ordering_key={self._ordering_key!r}, delivery_attempt={self._delivery_attempt!r}, "
            f"size={self.size}, resolved={self._resolved})"
        )

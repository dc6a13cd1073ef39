"""pulse: transport-agnostic message envelope and publishing"""
from pulse.config.models import TransportConfig
from pulse.core.codec import Codec, decode, encode
from pulse.core.ids import IdGenerator, NUIDGenerator, SequenceGenerator, UUIDGenerator
from pulse.core.interfaces import AsyncTransport, Transport
from pulse.core.message import CallbackResolver, Message, Resolver
from pulse.errors import (
    CanceledError,
    ClosedError,
    DecodeError,
    EncodeError,
    PublishError,
    PublishTimeoutError,
    PulseError,
    TransportConnectionError,
    UnknownTransportError,
)
from pulse.sender import AsyncSender, Sender, SenderState, new_async_sender, new_sender

__version__ = "0.1.0"

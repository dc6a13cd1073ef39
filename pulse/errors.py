"""Error taxonomy for pulse"""
import asyncio
from typing import Optional


class PulseError(Exception):
    """Base class for all pulse errors"""


class TransportConnectionError(PulseError, ConnectionError):
    """Transport could not be reached, or the connection was lost during a send"""


class PublishError(PulseError):
    """The broker rejected a publish for a reason other than connectivity"""


class EncodeError(PulseError):
    """A message could not be encoded to the wire format"""


class DecodeError(PulseError):
    """Bytes could not be decoded into a message"""


class ClosedError(PulseError):
    """Operation attempted on a sender after close"""


class UnknownTransportError(PulseError, ValueError):
    """No transport is registered for a URL scheme"""


class PublishTimeoutError(PulseError, TimeoutError):
    """The publish deadline elapsed before the transport confirmed it.

    ``delivered`` is ``None`` when the broker may or may not have accepted
    the message.
    """

    def __init__(self, message: str = "publish timed out", delivered: Optional[bool] = None):
        super().__init__(message)
        self.delivered = delivered


# A canceled publish re-raises the caller's own cancellation untouched so that
# ``except Exception`` never absorbs it and ``asyncio.timeout`` still converts
# it. The outcome is unknown, as with ``PublishTimeoutError(delivered=None)``.
CanceledError = asyncio.CancelledError

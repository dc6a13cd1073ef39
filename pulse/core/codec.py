"""Versioned wire codec for messages.

Wire format, version 1 (integers are big endian)::

    offset  size  field
    0       4     magic b"PLSM"
    4       1     format version
    5       4     header length N (uint32)
    9       N     header, a UTF-8 JSON object
    9+N     ...   payload bytes, verbatim

Header keys are ``id``, ``ordering_key``, ``attributes``,
``delivery_attempt`` and ``size``. Resolution state is never written.
"""
import json
import struct
from typing import Any, Dict, Type

from pulse.core.message import Message
from pulse.errors import DecodeError, EncodeError, PulseError

MAGIC = b"PLSM"
VERSION = 1

_PREFIX = struct.Struct("!4sBI")


class Codec:
    """Stateless encoder/decoder for a single wire format version"""

    version = VERSION

    def encode(self, message: Message) -> bytes:
        """Encode all persistent fields of a message.

        The header is checked with the same rules :meth:`decode` applies, so
        anything encoded here decodes back to an equal message.
        """
        header = self._validate_header({
            'id': message.id,
            'ordering_key': message.ordering_key,
            'attributes': message.attributes,
            'delivery_attempt': message.delivery_attempt,
            'size': message.size,
        }, error=EncodeError)
        try:
            header_bytes = json.dumps(header, ensure_ascii=False, separators=(',', ':')).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Cannot encode message {message.id!r}: {e}") from e

        return _PREFIX.pack(MAGIC, self.version, len(header_bytes)) + header_bytes + message.data

    def decode(self, data: bytes) -> Message:
        """Decode bytes produced by :meth:`encode`"""
        data = bytes(data)
        if len(data) < _PREFIX.size:
            raise DecodeError(f"Truncated message: {len(data)} bytes")

        magic, version, header_length = _PREFIX.unpack_from(data)
        if magic != MAGIC:
            raise DecodeError(f"Bad magic {magic!r}")
        if version != self.version:
            raise DecodeError(f"Unsupported wire format version {version}, expected {self.version}")

        body_start = _PREFIX.size + header_length
        if body_start > len(data):
            raise DecodeError(f"Header length {header_length} exceeds message length")

        try:
            header = json.loads(data[_PREFIX.size:body_start].decode('utf-8'))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise DecodeError(f"Invalid header: {e}") from e

        fields = self._validate_header(header)
        return Message(data=data[body_start:], **fields)

    @staticmethod
    def _validate_header(header: Any, error: Type[PulseError] = DecodeError) -> Dict[str, Any]:
        if not isinstance(header, dict):
            raise error("Header is not an object")

        message_id = header.get('id')
        if not isinstance(message_id, str) or not message_id:
            raise error("Header is missing a message id")

        ordering_key = header.get('ordering_key', "")
        if not isinstance(ordering_key, str):
            raise error("ordering_key must be a string")

        attributes = header.get('attributes', {})
        if not isinstance(attributes, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in attributes.items()
        ):
            raise error("attributes must map strings to strings")

        delivery_attempt = header.get('delivery_attempt')
        if delivery_attempt is not None and (
            isinstance(delivery_attempt, bool) or not isinstance(delivery_attempt, int)
        ):
            raise error("delivery_attempt must be an integer or null")

        size = header.get('size', 0)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise error("size must be a non-negative integer")

        return {
            'id': message_id,
            'ordering_key': ordering_key,
            'attributes': attributes,
            'delivery_attempt': delivery_attempt,
            'size': size,
        }


_default_codec = Codec()


def encode(message: Message) -> bytes:
    return _default_codec.encode(message)


def decode(data: bytes) -> Message:
    return _default_codec.decode(data)


to_bytes = encode
to_message = decode

"""Unit tests for the message envelope and its ack/nack lifecycle"""
import threading
from unittest.mock import MagicMock

import pytest

from pulse.core.ids import SequenceGenerator
from pulse.core.message import (
    DEFAULT_TOPIC,
    CallbackResolver,
    Message,
    Resolver,
)


class RecordingResolver(Resolver):
    def __init__(self):
        self.calls = []
        self._lock = threading.Lock()

    def resolve(self, message_id: str, ack: bool) -> None:
        with self._lock:
            self.calls.append((message_id, ack))


class TestMessageConstruction:
    def test_new_assigns_id_and_empty_metadata(self):
        msg = Message.new(b"hello", id_generator=SequenceGenerator("m"))

        assert msg.id == "m-1"
        assert msg.data == b"hello"
        assert msg.ordering_key == ""
        assert msg.attributes == {}
        assert msg.delivery_attempt is None

    def test_new_with_ordering_key(self):
        msg = Message.new_with_ordering_key(b"data", "order-42")
        assert msg.ordering_key == "order-42"

    def test_default_generator_gives_distinct_ids(self):
        ids = {Message.new(b"x").id for _ in range(10_000)}
        assert len(ids) == 10_000

    def test_injected_generators_are_independent(self):
        first = SequenceGenerator("a")
        second = SequenceGenerator("b")

        assert Message.new(b"", id_generator=first).id == "a-1"
        assert Message.new(b"", id_generator=second).id == "b-1"
        assert Message.new(b"", id_generator=first).id == "a-2"

    def test_identity_fields_are_read_only(self):
        msg = Message.new(b"data")
        with pytest.raises(AttributeError):
            msg.id = "other"
        with pytest.raises(AttributeError):
            msg.data = b"other"
        with pytest.raises(AttributeError):
            msg.ordering_key = "other"
        with pytest.raises(AttributeError):
            msg.delivery_attempt = 3

    def test_data_is_copied_from_mutable_buffer(self):
        buffer = bytearray(b"abc")
        msg = Message.new(buffer)
        buffer[0] = ord("z")
        assert msg.data == b"abc"

    def test_size_counts_payload_attributes_and_key(self):
        msg = Message(id="x", data=b"12345", ordering_key="ok", attributes={"k": "vv"})
        assert msg.size == 5 + 1 + 2 + 2

    def test_explicit_size_is_kept(self):
        msg = Message(id="x", data=b"12345", size=99)
        assert msg.size == 99


class TestMessageTopic:
    def test_topic_defaults_when_unset(self):
        assert Message.new(b"").topic == DEFAULT_TOPIC

    def test_set_topic_writes_attribute(self):
        msg = Message.new(b"").set_topic("orders")
        assert msg.topic == "orders"
        assert msg.get_attribute("topic") == "orders"

    def test_get_attribute_default(self):
        assert Message.new(b"").get_attribute("missing", "fallback") == "fallback"


class TestAckNack:
    def test_ack_invokes_resolver_once(self):
        resolver = RecordingResolver()
        msg = Message.new(b"data").bind(resolver)

        msg.ack()
        msg.ack()

        assert resolver.calls == [(msg.id, True)]
        assert msg.resolved

    def test_nack_invokes_resolver_with_false(self):
        resolver = RecordingResolver()
        msg = Message.new(b"data").bind(resolver)

        msg.nack()

        assert resolver.calls == [(msg.id, False)]

    def test_nack_after_ack_is_no_op(self):
        resolver = RecordingResolver()
        msg = Message.new(b"data").bind(resolver)

        msg.ack()
        msg.nack()

        assert resolver.calls == [(msg.id, True)]

    def test_ack_after_nack_is_no_op(self):
        resolver = RecordingResolver()
        msg = Message.new(b"data").bind(resolver)

        msg.nack()
        msg.ack()

        assert resolver.calls == [(msg.id, False)]

    def test_ack_without_resolver_does_not_fail(self):
        msg = Message.new(b"data")
        msg.ack()
        msg.nack()
        assert not msg.resolved

    def test_plain_callable_is_wrapped(self):
        callback = MagicMock()
        msg = Message.new(b"data").bind(callback)

        msg.ack()

        callback.assert_called_once_with(msg.id, True)
        assert isinstance(msg._resolver, CallbackResolver)

    def test_resolver_errors_are_not_propagated(self):
        callback = MagicMock(side_effect=RuntimeError("broker unreachable"))
        msg = Message.new(b"data").bind(callback)

        msg.ack()  # should not raise
        msg.ack()

        callback.assert_called_once()

    def test_concurrent_ack_and_nack_resolve_exactly_once(self):
        resolver = RecordingResolver()
        msg = Message.new(b"data").bind(resolver)
        barrier = threading.Barrier(16)

        def _resolve(i):
            barrier.wait()
            if i % 2:
                msg.ack()
            else:
                msg.nack()

        threads = [threading.Thread(target=_resolve, args=(i,)) for i in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(resolver.calls) == 1


class TestMessageEquality:
    def test_equal_on_persistent_fields(self):
        a = Message(id="1", data=b"x", attributes={"k": "v"})
        b = Message(id="1", data=b"x", attributes={"k": "v"})
        assert a == b

    def test_resolution_state_is_ignored(self):
        a = Message(id="1", data=b"x").bind(MagicMock())
        b = Message(id="1", data=b"x")
        a.ack()
        assert a == b

    def test_different_ids_are_not_equal(self):
        assert Message(id="1", data=b"x") != Message(id="2", data=b"x")

    def test_repr_shows_id(self):
        assert "id='abc'" in repr(Message(id="abc", data=b""))

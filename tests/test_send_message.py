"""Tests for the send-message flow."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from didcomm_demo.flows import FlowError, ValidationError, send_message
from didcomm_demo.messaging import MessagingError
from didcomm_demo.models import PacketDirection, PacketStep

SEND_STEPS = [
    PacketStep.PLAINTEXT_MESSAGE,
    PacketStep.ENCRYPTED_PAYLOAD,
    PacketStep.ENCRYPTED_FORWARD,
    PacketStep.MEDIATOR_SEND,
    PacketStep.MEDIATOR_ACK,
    PacketStep.MESSAGE_DELIVERY,
]


async def received(subscription) -> list:
    items = []
    while subscription.pending():
        items.append(await subscription.recv())
    return items


class TestSendMessageHappyPath:
    """Tests for a successful send."""

    @pytest.mark.asyncio
    async def test_six_ordered_events(self, context):
        """Test alice -> bob 'hi' emits the six steps in order."""
        events = await send_message(context, "alice", "bob", "hi")

        assert [e.step for e in events] == SEND_STEPS
        correlation_ids = {e.correlation_id for e in events}
        assert len(correlation_ids) == 1
        assert correlation_ids.pop()

    @pytest.mark.asyncio
    async def test_events_reach_observers_in_order(self, context, bus):
        """Test that observers see exactly the returned events."""
        subscription = bus.subscribe()

        events = await send_message(context, "alice", "bob", "hi")

        assert await received(subscription) == events

    @pytest.mark.asyncio
    async def test_event_details(self, context, identities):
        """Test endpoints, directions and payloads of each step."""
        alice, bob = identities.get("alice"), identities.get("bob")

        events = await send_message(context, "Alice", "BOB", "hi")
        plaintext, encrypted, forward, send, ack, delivery = events

        assert plaintext.direction == PacketDirection.OUTBOUND
        assert (plaintext.from_, plaintext.to) == (alice.did, bob.did)
        assert plaintext.payload["body"] == {"content": "hi"}
        assert plaintext.payload["expires_time"] - plaintext.payload["created_time"] == 300

        assert "ciphertext" in encrypted.payload
        assert forward.to == bob.mediator_did
        assert forward.to_alias == "mediator"

        assert send.payload["msg_id"] == plaintext.payload["id"]
        assert send.payload["size_bytes"] > 0
        assert send.to == "mediator"

        assert ack.direction == PacketDirection.INBOUND
        assert ack.payload["status"] == "stored"

        assert delivery.to == bob.did
        assert delivery.payload["status"] == "delivered"
        assert (delivery.from_alias, delivery.to_alias) == ("alice", "bob")

    @pytest.mark.asyncio
    async def test_message_stored_for_recipient(self, context, mediator, identities):
        """Test that the recipient's mailbox holds the message."""
        events = await send_message(context, "bob", "alice", "hello alice")

        stored = await mediator.fetch_messages(identities.get("alice").profile)
        assert [s.msg_id for s in stored] == [events[0].payload["id"]]

    @pytest.mark.asyncio
    async def test_note_to_self(self, context, mediator, identities):
        """Test a party can message itself through its mediator."""
        events = await send_message(context, "alice", "alice", "note to self")

        assert [e.step for e in events] == SEND_STEPS
        assert events[-1].to_alias == "alice"
        stored = await mediator.fetch_messages(identities.get("alice").profile)
        assert [s.msg_id for s in stored] == [events[0].payload["id"]]

    @pytest.mark.asyncio
    async def test_concurrent_flows_keep_their_order(self, context, bus):
        """Test that concurrent flows interleave but each stays ordered."""
        subscription = bus.subscribe()

        results = await asyncio.gather(
            send_message(context, "alice", "bob", "one"),
            send_message(context, "bob", "alice", "two"),
            send_message(context, "alice", "bob", "three"),
        )

        seen = await received(subscription)
        assert len(seen) == 18
        for events in results:
            corr = events[0].correlation_id
            assert [e for e in seen if e.correlation_id == corr] == events
        assert len({events[0].correlation_id for events in results}) == 3


class TestSendMessageValidation:
    """Tests for rejected input."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["", "   "])
    async def test_empty_body(self, context, bus, body):
        """Test empty body is rejected with no bus activity."""
        subscription = bus.subscribe()

        with pytest.raises(ValidationError, match="empty"):
            await send_message(context, "alice", "bob", body)

        assert subscription.pending() == 0

    @pytest.mark.asyncio
    async def test_unknown_sender(self, context, bus, mediator):
        """Test unknown sender is rejected before any messaging call."""
        subscription = bus.subscribe()
        mediator.declare_intent = AsyncMock()

        with pytest.raises(ValidationError, match="Unknown sender: carol"):
            await send_message(context, "carol", "bob", "hi")

        assert subscription.pending() == 0
        mediator.declare_intent.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_recipient(self, context, bus):
        """Test unknown recipient is rejected with zero events."""
        subscription = bus.subscribe()

        with pytest.raises(ValidationError, match="Unknown recipient: mediator"):
            await send_message(context, "alice", "mediator", "hi")

        assert subscription.pending() == 0


class TestSendMessageFailures:
    """Tests for messaging failures part-way through."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,step,published",
        [
            ("declare_intent", "plaintext_message", 0),
            ("pack", "encrypted_payload", 1),
            ("wrap_for_relay", "encrypted_forward", 2),
            ("dispatch", "mediator_ack", 4),
        ],
    )
    async def test_failure_names_step(self, context, bus, mediator, method, step, published):
        """Test the failing step is reported and earlier events stay published."""
        subscription = bus.subscribe()
        setattr(mediator, method, AsyncMock(side_effect=MessagingError("boom")))

        with pytest.raises(FlowError) as exc_info:
            await send_message(context, "alice", "bob", "hi")

        assert exc_info.value.step == step
        assert "boom" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, MessagingError)
        seen = await received(subscription)
        assert [e.step for e in seen] == SEND_STEPS[:published]

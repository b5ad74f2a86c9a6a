"""Tests for the in-memory broker and transport."""

from __future__ import annotations

import pytest

from relay_messaging.envelope import QueueHandle
from relay_messaging.exceptions import MessagingConnectionError, MessagingTimeoutError
from relay_messaging.memory import InMemoryQueueBroker, InMemoryTransport
from relay_messaging.ports import ITransport


def test_in_memory_transport_is_a_transport(transport: InMemoryTransport) -> None:
    assert isinstance(transport, ITransport)


def test_broker_take_and_ack(broker: InMemoryQueueBroker) -> None:
    first = broker.put("q", b"1")
    broker.put("q", b"2")
    assert broker.take("q", 1) == [(first, b"1")]
    assert broker.pending("q") == 1
    assert broker.in_flight == [first]
    assert broker.ack(first) is True
    assert broker.ack(first) is False
    assert broker.acked == [first]


def test_broker_requeue_goes_to_front(broker: InMemoryQueueBroker) -> None:
    first = broker.put("q", b"1")
    broker.put("q", b"2")
    broker.take("q", 1)
    broker.requeue([first])
    assert broker.take("q", 10) == [(first, b"1"), ("m-2", b"2")]


def test_broker_dead_letters_after_max_deliveries() -> None:
    broker = InMemoryQueueBroker(max_deliveries=2)
    message_id = broker.put("q", b"poison")
    broker.take("q", 1)
    broker.requeue([message_id])
    broker.take("q", 1)
    broker.requeue([message_id])
    assert broker.pending("q") == 0
    assert broker.dead_letters == [("q", b"poison")]


@pytest.mark.asyncio
async def test_receive_waits_at_most_wait_timeout(
    transport: InMemoryTransport, handle: QueueHandle
) -> None:
    session = await transport.connect()
    assert await transport.receive(session, handle, 10, 0.01) == []


@pytest.mark.asyncio
async def test_close_redelivers_unacked(
    transport: InMemoryTransport, handle: QueueHandle
) -> None:
    session = await transport.connect()
    await transport.send_raw(session, handle, b"a")
    await transport.send_raw(session, handle, b"b")
    first, second = await transport.receive(session, handle, 10, 0.01)
    await transport.acknowledge(session, first)
    await transport.close(session)
    await transport.close(session)
    assert transport.closed == [session]

    again = await transport.connect()
    redelivered = await transport.receive(again, handle, 10, 0.01)
    assert [m.body for m in redelivered] == [b"b"]
    assert redelivered[0].message_id == second.message_id


@pytest.mark.asyncio
async def test_closed_session_rejects_calls(
    transport: InMemoryTransport, handle: QueueHandle
) -> None:
    session = await transport.connect()
    await transport.close(session)
    with pytest.raises(MessagingConnectionError):
        await transport.send_raw(session, handle, b"x")
    with pytest.raises(MessagingConnectionError):
        await transport.receive(session, handle, 1, 0.01)


@pytest.mark.asyncio
async def test_scripted_failures_are_consumed_in_order(
    transport: InMemoryTransport, handle: QueueHandle
) -> None:
    transport.fail_connect.append(MessagingConnectionError("down"))
    transport.fail_send.append(MessagingTimeoutError("slow"))
    with pytest.raises(MessagingConnectionError):
        await transport.connect()
    session = await transport.connect()
    with pytest.raises(MessagingTimeoutError):
        await transport.send_raw(session, handle, b"x")
    assert await transport.send_raw(session, handle, b"x") == "m-1"
    assert transport.send_attempts == 2

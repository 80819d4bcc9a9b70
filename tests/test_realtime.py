"""Tests for the in-process change feed."""

from uuid import uuid4

import pytest

from app.services.realtime import ChangeFeed, APPOINTMENTS, QUEUE_ENTRIES


@pytest.mark.asyncio
async def test_publish_reaches_only_matching_subscribers():
    feed = ChangeFeed()
    biz, other = uuid4(), uuid4()
    received, elsewhere = [], []

    async def on_change(message):
        received.append(message)

    async def on_other(message):
        elsewhere.append(message)

    feed.subscribe(QUEUE_ENTRIES, biz, on_change)
    feed.subscribe(QUEUE_ENTRIES, other, on_other)
    feed.subscribe(APPOINTMENTS, biz, on_other)

    delivered = await feed.publish(QUEUE_ENTRIES, biz, "INSERT", {"queue_number": 1})

    assert delivered == 1
    assert received == [{
        "table": "queue_entries",
        "event": "INSERT",
        "business_id": str(biz),
        "record": {"queue_number": 1},
    }]
    assert elsewhere == []


@pytest.mark.asyncio
async def test_unsubscribe():
    feed = ChangeFeed()
    biz = uuid4()
    received = []

    async def on_change(message):
        received.append(message)

    unsubscribe = feed.subscribe(APPOINTMENTS, biz, on_change)
    assert feed.subscriber_count(APPOINTMENTS, biz) == 1
    unsubscribe()
    assert feed.subscriber_count(APPOINTMENTS, biz) == 0

    assert await feed.publish(APPOINTMENTS, biz, "UPDATE", {}) == 0
    assert received == []


@pytest.mark.asyncio
async def test_failing_subscriber_is_dropped_and_others_still_notified():
    feed = ChangeFeed()
    biz = uuid4()
    received = []

    async def broken(message):
        raise ConnectionError("socket closed")

    async def healthy(message):
        received.append(message)

    feed.subscribe(QUEUE_ENTRIES, biz, broken)
    feed.subscribe(QUEUE_ENTRIES, biz, healthy)

    assert await feed.publish(QUEUE_ENTRIES, biz, "UPDATE", {}) == 1
    assert len(received) == 1
    assert feed.subscriber_count(QUEUE_ENTRIES, biz) == 1

# sharemarkets/tests/test_events.py

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime
from sharemarkets.core.events import (Event, EventLog, TradeRecord,
                                      create_trade_event, create_transfer_event)

@pytest.fixture
def record():
    return TradeRecord(
        trader="trader1",
        subject="subject1",
        is_buy=True,
        share_amount=10,
        base_price=24062500000000000,
        protocol_fee_amount=962500000000000,
        protocol_b_fee_amount=962500000000000,
        subject_fee_amount=481250000000000,
        resulting_supply=11
    )

def test_event_creation():
    """Test basic event creation."""
    event = Event("TestEvent", {"param1": "value1"})
    assert event.name == "TestEvent"
    assert event.params["param1"] == "value1"
    assert isinstance(event.timestamp, datetime)

def test_event_log():
    """Test EventLog basic functionality."""
    log = EventLog()
    event1 = Event("Event1", {"param1": "value1"})
    event2 = Event("Event2", {"param2": "value2"})

    log.emit(event1)
    log.emit(event2)

    events = log.get_events()
    assert len(events) == 2
    assert events[0].name == "Event1"
    assert events[1].name == "Event2"

def test_event_filtering():
    """Test filtering events by name."""
    log = EventLog()
    log.emit(Event("TypeA", {"value": 1}))
    log.emit(Event("TypeB", {"value": 2}))
    log.emit(Event("TypeA", {"value": 3}))

    type_a_events = log.get_events("TypeA")
    assert len(type_a_events) == 2
    assert all(e.name == "TypeA" for e in type_a_events)

def test_trade_event_creation(record):
    """Test trade event factory function."""
    event = create_trade_event(record)

    assert event.name == "Trade"
    assert event.params["trader"] == "trader1"
    assert event.params["subject"] == "subject1"
    assert event.params["is_buy"] is True
    assert event.params["base_price"] == 24062500000000000
    assert event.params["resulting_supply"] == 11

def test_trade_record_is_immutable(record):
    with pytest.raises(FrozenInstanceError):
        record.share_amount = 2

def test_transfer_event_creation():
    event = create_transfer_event("user1", "market", 100)

    assert event.name == "Transfer"
    assert event.params["from"] == "user1"
    assert event.params["amount"] == 100


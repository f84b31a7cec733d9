# sharemarkets/core/events.py

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional
from datetime import datetime

@dataclass
class Event:
    """Base class for all events in the system."""
    name: str
    params: Dict[str, Any]
    timestamp: datetime = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()

@dataclass(frozen=True)
class TradeRecord:
    """Audit record of a single buy or sell."""
    trader: str
    subject: str
    is_buy: bool
    share_amount: int
    base_price: int
    protocol_fee_amount: int
    protocol_b_fee_amount: int
    subject_fee_amount: int
    resulting_supply: int

class EventLog:
    """Maintains a log of all events in the system."""
    def __init__(self):
        self._events: List[Event] = []

    def emit(self, event: Event):
        """Add an event to the log."""
        self._events.append(event)

    def get_events(self, event_name: Optional[str] = None) -> List[Event]:
        """
        Retrieve events from the log.
        If event_name is provided, only returns events with that name.
        """
        if event_name is None:
            return self._events.copy()
        return [e for e in self._events if e.name == event_name]

# Common event factories
def create_trade_event(record: TradeRecord) -> Event:
    return Event(name="Trade", params=asdict(record))

def create_transfer_event(from_address: str, to_address: str, amount: int) -> Event:
    return Event(
        name="Transfer",
        params={
            "from": from_address,
            "to": to_address,
            "amount": amount
        }
    )

def create_approval_event(owner: str, spender: str, amount: int) -> Event:
    return Event(
        name="Approval",
        params={
            "owner": owner,
            "spender": spender,
            "amount": amount
        }
    )

def create_fee_config_event(setting: str, value: Any) -> Event:
    return Event(
        name="FeeConfigChanged",
        params={
            "setting": setting,
            "value": value
        }
    )

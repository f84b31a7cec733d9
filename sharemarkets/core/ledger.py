# sharemarkets/core/ledger.py

import threading
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple
from .events import (EventLog, Event, create_transfer_event,
                     create_approval_event)

class InsufficientBalanceError(Exception):
    """Raised when an address has insufficient balance for a transfer."""
    pass

class InsufficientAllowanceError(Exception):
    """Raised when a spender has not been approved for enough tokens."""
    pass

class Ledger:
    """
    Reserve token ledger modelled on an ERC-20, including approvals.
    Amounts are integers in the token's smallest unit.
    """
    def __init__(self, event_log: EventLog):
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._event_log = event_log
        self._total_supply: int = 0
        self._lock = threading.RLock()
        # Events held back while an atomic() block is open
        self._pending: Optional[List[Event]] = None

    def balance_of(self, address: str) -> int:
        """Get the balance of an address."""
        return self._balances.get(address, 0)

    def total_supply(self) -> int:
        """Get total supply of tokens in the system."""
        return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        """Get how much `spender` may still move on behalf of `owner`."""
        return self._allowances.get((owner, spender), 0)

    def mint(self, to_address: str, amount: int) -> bool:
        """
        Create new tokens and assign them to an address.
        Similar to depositing new funds into the system.
        """
        _check_amount(amount)
        if amount == 0:
            raise ValueError("Mint amount must be positive")

        with self._lock:
            self._balances[to_address] = self.balance_of(to_address) + amount
            self._total_supply += amount

            self._emit(Event(
                name="Mint",
                params={
                    "to": to_address,
                    "amount": amount
                }
            ))
        return True

    def burn(self, from_address: str, amount: int) -> bool:
        """
        Destroy tokens from an address.
        Similar to withdrawing funds from the system.
        """
        _check_amount(amount)
        if amount == 0:
            raise ValueError("Burn amount must be positive")

        with self._lock:
            current_balance = self.balance_of(from_address)
            if current_balance < amount:
                raise InsufficientBalanceError(
                    f"ERC20: burn amount exceeds balance: {current_balance} < {amount}")

            self._balances[from_address] = current_balance - amount
            self._total_supply -= amount

            self._emit(Event(
                name="Burn",
                params={
                    "from": from_address,
                    "amount": amount
                }
            ))
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """
        Allow `spender` to move up to `amount` of `owner`'s tokens.
        Replaces any previous allowance.
        """
        _check_amount(amount)
        with self._lock:
            self._allowances[(owner, spender)] = amount
            self._emit(create_approval_event(owner, spender, amount))
        return True

    def transfer(self, from_address: str, to_address: str, amount: int) -> bool:
        """
        Transfer tokens from one address to another.
        Zero-amount transfers succeed.
        """
        _check_amount(amount)
        with self._lock:
            self._move(from_address, to_address, amount)
        return True

    def transfer_from(self, spender: str, from_address: str,
                      to_address: str, amount: int) -> bool:
        """
        Transfer tokens on behalf of `from_address`, spending the allowance
        it granted to `spender`.
        """
        _check_amount(amount)
        with self._lock:
            current_allowance = self.allowance(from_address, spender)
            if current_allowance < amount:
                raise InsufficientAllowanceError("ERC20: insufficient allowance")

            self._move(from_address, to_address, amount)
            self._allowances[(from_address, spender)] = current_allowance - amount
        return True

    @contextmanager
    def atomic(self):
        """
        Group several operations so they all apply or none do.

        Balances, allowances and supply are restored if the block raises,
        and its events are only emitted once it completes. Other callers
        are locked out until the block exits. Nested blocks join the
        outermost one.
        """
        with self._lock:
            if self._pending is not None:
                yield
                return

            balances = dict(self._balances)
            allowances = dict(self._allowances)
            total_supply = self._total_supply
            self._pending = []
            try:
                yield
            except Exception:
                self._balances = balances
                self._allowances = allowances
                self._total_supply = total_supply
                self._pending = None
                raise

            pending, self._pending = self._pending, None
            for event in pending:
                self._event_log.emit(event)

    def _emit(self, event: Event):
        if self._pending is not None:
            self._pending.append(event)
        else:
            self._event_log.emit(event)

    def _move(self, from_address: str, to_address: str, amount: int):
        from_balance = self.balance_of(from_address)
        if from_balance < amount:
            raise InsufficientBalanceError(
                "ERC20: transfer amount exceeds balance")

        if from_address != to_address:
            self._balances[from_address] = from_balance - amount
            self._balances[to_address] = self.balance_of(to_address) + amount

        self._emit(create_transfer_event(from_address, to_address, amount))

def _check_amount(amount: int):
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"Amount must be an int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {amount}")

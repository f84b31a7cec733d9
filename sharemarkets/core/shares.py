# sharemarkets/core/shares.py

from typing import Dict, Tuple

class InsufficientSharesError(Exception):
    """Raised when a holder tries to remove more shares than they own."""
    pass

class ShareLedger:
    """
    Per-subject share supply and per-(subject, holder) balances.
    Holders with a zero balance are dropped from the table.
    """
    def __init__(self):
        self._supply: Dict[str, int] = {}
        self._balances: Dict[Tuple[str, str], int] = {}

    def supply_of(self, subject: str) -> int:
        """Total shares issued on `subject`'s curve."""
        return self._supply.get(subject, 0)

    def balance_of(self, subject: str, holder: str) -> int:
        """Shares of `subject` owned by `holder`."""
        return self._balances.get((subject, holder), 0)

    def holders(self, subject: str) -> Dict[str, int]:
        """All non-zero holders of `subject` and their balances."""
        return {h: b for (s, h), b in self._balances.items() if s == subject}

    def credit(self, subject: str, holder: str, amount: int):
        """Issue `amount` new shares of `subject` to `holder`."""
        if amount < 0:
            raise ValueError(f"Credit amount cannot be negative: {amount}")
        if amount == 0:
            return
        self._balances[(subject, holder)] = self.balance_of(subject, holder) + amount
        self._supply[subject] = self.supply_of(subject) + amount

    def debit(self, subject: str, holder: str, amount: int):
        """Burn `amount` of `holder`'s shares of `subject`."""
        if amount < 0:
            raise ValueError(f"Debit amount cannot be negative: {amount}")

        balance = self.balance_of(subject, holder)
        if balance < amount:
            raise InsufficientSharesError(
                f"Insufficient shares: {balance} < {amount}")
        if amount == 0:
            return

        if balance == amount:
            del self._balances[(subject, holder)]
        else:
            self._balances[(subject, holder)] = balance - amount
        self._supply[subject] = self.supply_of(subject) - amount

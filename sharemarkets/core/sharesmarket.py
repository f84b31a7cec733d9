import logging
import threading
from typing import Dict
from sharemarkets.core.curvemath import (get_price, ArithmeticUnderflowError,
                                         PRICE_NUMERATOR, PRICE_DENOMINATOR)
from sharemarkets.core.events import EventLog, TradeRecord, create_trade_event
from sharemarkets.core.fees import FeeBreakdown, FeeConfig, apply_fees
from sharemarkets.core.ledger import Ledger, InsufficientBalanceError
from sharemarkets.core.roles import FeeConfigSource
from sharemarkets.core.shares import ShareLedger, InsufficientSharesError

logger = logging.getLogger(__name__)

class LastShareProtectedError(Exception):
    """Raised when a sell would take a subject's supply to zero."""
    pass

class SharesMarket:
    """
    Bonding-curve market in the shares of many subjects, settled in a
    reserve token. Each subject's curve prices share k at k^2 / 16000 tokens.
    """
    def __init__(self, fund_token: Ledger, fee_source: FeeConfigSource,
                 event_log: EventLog, address: str = "shares_market",
                 price_numerator: int = PRICE_NUMERATOR,
                 price_denominator: int = PRICE_DENOMINATOR):
        self.fund_token = fund_token
        self.fee_source = fee_source
        self.event_log = event_log
        self.address = address
        self.price_numerator = price_numerator
        self.price_denominator = price_denominator

        self.shares = ShareLedger()

        # One lock per subject; trades on different subjects don't contend
        self._subject_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def get_price(self, supply: int, amount: int) -> int:
        """Base cost of the `amount` shares issued after `supply`."""
        return get_price(supply, amount, self.price_numerator, self.price_denominator)

    def get_buy_price(self, subject: str, amount: int) -> int:
        return self.get_price(self.shares.supply_of(subject), amount)

    def get_sell_price(self, subject: str, amount: int) -> int:
        supply = self.shares.supply_of(subject)
        if amount > supply:
            raise ArithmeticUnderflowError(
                f"Cannot price {amount} shares out of a supply of {supply}")
        return self.get_price(supply - amount, amount)

    def get_buy_price_after_fee(self, subject: str, amount: int) -> int:
        price = self.get_buy_price(subject, amount)
        return apply_fees(price, True, self.fee_source.fee_config()).total

    def get_sell_price_after_fee(self, subject: str, amount: int) -> int:
        price = self.get_sell_price(subject, amount)
        return apply_fees(price, False, self.fee_source.fee_config()).total

    def shares_supply(self, subject: str) -> int:
        return self.shares.supply_of(subject)

    def shares_balance(self, subject: str, holder: str) -> int:
        return self.shares.balance_of(subject, holder)

    def escrow_balance(self) -> int:
        """Reserve tokens held against all outstanding shares"""
        return self.fund_token.balance_of(self.address)

    def buy_shares(self, trader: str, subject: str, amount: int) -> TradeRecord:
        """
        Buy `amount` shares of `subject` for `trader`.

        The trader must have approved the market for the price plus fees.
        The first share of any subject costs nothing and must be bought alone.

        Returns:
            TradeRecord describing the trade
        """
        _check_amount(amount)
        with self._lock_for(subject):
            supply = self.shares.supply_of(subject)
            price = self.get_price(supply, amount)
            config = self.fee_source.fee_config()
            breakdown = apply_fees(price, True, config)

            # Every token movement of the trade applies together or not at all
            with self.fund_token.atomic():
                self.fund_token.transfer_from(self.address, trader, self.address,
                                              breakdown.total)
                self._pay_fees(subject, config, breakdown)
            self.shares.credit(subject, trader, amount)

            return self._record_trade(trader, subject, True, amount, breakdown)

    def sell_shares(self, trader: str, subject: str, amount: int) -> TradeRecord:
        """
        Sell `amount` of `trader`'s shares of `subject` back to the curve.

        Raises:
            InsufficientSharesError: trader holds fewer than `amount`
            LastShareProtectedError: the sale would leave the curve empty
        """
        _check_amount(amount)
        with self._lock_for(subject):
            supply = self.shares.supply_of(subject)

            if self.shares.balance_of(subject, trader) < amount:
                logger.warning("Rejected sell of %d %s shares by %s: insufficient shares",
                               amount, subject, trader)
                raise InsufficientSharesError("Insufficient shares")
            if supply - amount < 1:
                logger.warning("Rejected sell of %d %s shares by %s: last share",
                               amount, subject, trader)
                raise LastShareProtectedError("Cannot sell the last share")

            price = self.get_price(supply - amount, amount)
            config = self.fee_source.fee_config()
            breakdown = apply_fees(price, False, config)

            escrow = self.escrow_balance()
            if escrow < price:
                raise InsufficientBalanceError(
                    f"ERC20: transfer amount exceeds balance: {escrow} < {price}")

            self.shares.debit(subject, trader, amount)
            try:
                with self.fund_token.atomic():
                    self.fund_token.transfer(self.address, trader, breakdown.total)
                    self._pay_fees(subject, config, breakdown)
            except Exception:
                self.shares.credit(subject, trader, amount)
                raise

            return self._record_trade(trader, subject, False, amount, breakdown)

    def _pay_fees(self, subject: str, config: FeeConfig, breakdown: FeeBreakdown):
        self.fund_token.transfer(self.address, config.protocol_fee_destination,
                                 breakdown.protocol_fee_amount)
        self.fund_token.transfer(self.address, config.protocol_b_fee_destination,
                                 breakdown.protocol_b_fee_amount)
        self.fund_token.transfer(self.address, subject, breakdown.subject_fee_amount)

    def _record_trade(self, trader: str, subject: str, is_buy: bool,
                      amount: int, breakdown: FeeBreakdown) -> TradeRecord:
        record = TradeRecord(
            trader=trader,
            subject=subject,
            is_buy=is_buy,
            share_amount=amount,
            base_price=breakdown.base_price,
            protocol_fee_amount=breakdown.protocol_fee_amount,
            protocol_b_fee_amount=breakdown.protocol_b_fee_amount,
            subject_fee_amount=breakdown.subject_fee_amount,
            resulting_supply=self.shares.supply_of(subject),
        )
        logger.info("%s %s %d %s shares at %d (supply now %d)",
                    trader, "bought" if is_buy else "sold", amount, subject,
                    breakdown.base_price, record.resulting_supply)
        self.event_log.emit(create_trade_event(record))
        return record

    def _lock_for(self, subject: str) -> threading.Lock:
        # Locks are kept for the life of the market, one per subject ever
        # traded (including failed attempts), so the map is bounded by the
        # number of distinct subjects.
        with self._registry_lock:
            lock = self._subject_locks.get(subject)
            if lock is None:
                lock = self._subject_locks[subject] = threading.Lock()
            return lock

def _check_amount(amount: int):
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError("Share amount must be an int")
    if amount < 0:
        raise ValueError(f"Share amount cannot be negative: {amount}")

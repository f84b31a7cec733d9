# sharemarkets/core/fees.py

"""
Three-way trade fee split: protocol A, protocol B and the subject.

Fractions are fixed point over FEE_DENOMINATOR (10**18 == 100%). Each fee is
floored independently; the amounts are never reconciled against each other.
"""

from dataclasses import dataclass

FEE_DENOMINATOR = 10**18
PERCENT = FEE_DENOMINATOR // 100

def _check_fraction(name: str, value: int):
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")

@dataclass(frozen=True)
class FeeConfig:
    protocol_fee_destination: str
    protocol_b_fee_destination: str
    protocol_fee_percent: int = 4 * PERCENT
    protocol_b_fee_percent: int = 4 * PERCENT
    subject_fee_percent: int = 2 * PERCENT

    def __post_init__(self):
        for name in ("protocol_fee_percent", "protocol_b_fee_percent",
                     "subject_fee_percent"):
            _check_fraction(name, getattr(self, name))

@dataclass(frozen=True)
class FeeBreakdown:
    base_price: int
    protocol_fee_amount: int
    protocol_b_fee_amount: int
    subject_fee_amount: int
    # price_with_fee on a buy, price_after_fee on a sell
    total: int

    @property
    def total_fees(self) -> int:
        return (self.protocol_fee_amount + self.protocol_b_fee_amount
                + self.subject_fee_amount)

DEFAULT_FEE_CONFIG = FeeConfig(
    protocol_fee_destination="protocol_fee_destination",
    protocol_b_fee_destination="protocol_b_fee_destination",
)

def fee_amount(base_price: int, fraction: int) -> int:
    """floor(base_price * fraction / FEE_DENOMINATOR)"""
    return base_price * fraction // FEE_DENOMINATOR

def apply_fees(base_price: int, is_buy: bool, config: FeeConfig) -> FeeBreakdown:
    """
    Split the fee for a trade priced at `base_price`.

    On a buy the fees are added to what the trader pays; on a sell they
    are taken out of what the seller receives.
    """
    if base_price < 0:
        raise ValueError(f"base_price cannot be negative: {base_price}")

    protocol_fee = fee_amount(base_price, config.protocol_fee_percent)
    protocol_b_fee = fee_amount(base_price, config.protocol_b_fee_percent)
    subject_fee = fee_amount(base_price, config.subject_fee_percent)
    fees = protocol_fee + protocol_b_fee + subject_fee

    return FeeBreakdown(
        base_price=base_price,
        protocol_fee_amount=protocol_fee,
        protocol_b_fee_amount=protocol_b_fee,
        subject_fee_amount=subject_fee,
        total=base_price + fees if is_buy else base_price - fees,
    )

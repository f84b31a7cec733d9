# sharemarkets/core/curvemath.py

import numpy as np

# Price of a range is (S(b) - S(a)) * PRICE_NUMERATOR // PRICE_DENOMINATOR,
# i.e. 1/16000 of a whole token (18 decimals) per unit of sum-of-squares.
PRICE_NUMERATOR = 10**18
PRICE_DENOMINATOR = 16000
TOKEN_DECIMALS = 18

class ArithmeticUnderflowError(ArithmeticError):
    """Raised when a curve range would start below zero supply."""
    pass

def sum_of_squares(n: int) -> int:
    """
    Sum of k^2 for k in 1..n-1, using the closed form (n-1)n(2n-1)/6.

    Args:
        n: Number of issued shares (must be >= 0)

    Returns:
        S(n), with S(0) = S(1) = 0
    """
    if n < 0:
        raise ArithmeticUnderflowError(f"Supply cannot be negative: {n}")
    if n == 0:
        return 0
    return (n - 1) * n * (2 * n - 1) // 6

def get_price(supply: int, amount: int,
              numerator: int = PRICE_NUMERATOR,
              denominator: int = PRICE_DENOMINATOR) -> int:
    """
    Calculate the base cost of the `amount` shares issued after `supply`.

    Args:
        supply: Shares already issued on the curve
        amount: Number of shares in the range
        numerator, denominator: Scale from sum-of-squares to token units

    Returns:
        Cost in the reserve token's smallest unit, floored

    Raises:
        ArithmeticUnderflowError: if the curve is empty and more than one
            share is requested. The first share must be bought alone.
    """
    if supply < 0 or amount < 0:
        raise ValueError("supply and amount must be non-negative")
    if amount == 0:
        return 0
    if supply == 0 and amount > 1:
        raise ArithmeticUnderflowError(
            "Cannot price more than one share on an empty curve")

    summation = sum_of_squares(supply + amount) - sum_of_squares(supply)
    return summation * numerator // denominator

def marginal_prices(supplies, numerator: int = PRICE_NUMERATOR,
                    denominator: int = PRICE_DENOMINATOR) -> np.ndarray:
    """
    Price of the next single share at each supply, in whole tokens.

    Args:
        supplies: Scalar or array of supplies (>= 0)

    Returns:
        Float array; the next share after supply s costs s^2 / 16000 tokens
    """
    s = np.asarray(supplies, dtype=float)
    if np.any(s < 0):
        raise ValueError("supplies must be non-negative")
    return s ** 2 * numerator / denominator / 10**TOKEN_DECIMALS

def cumulative_costs(supplies, numerator: int = PRICE_NUMERATOR,
                     denominator: int = PRICE_DENOMINATOR) -> np.ndarray:
    """
    Total base cost of taking a curve from zero to each supply, in whole tokens.

    This is the escrow a subject's curve holds once `supply` shares exist.
    """
    s = np.asarray(supplies, dtype=float)
    if np.any(s < 0):
        raise ValueError("supplies must be non-negative")
    sums = np.where(s > 0, (s - 1) * s * (2 * s - 1) / 6, 0.0)
    return sums * numerator / denominator / 10**TOKEN_DECIMALS

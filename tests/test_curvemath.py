import pytest
import numpy as np
from sharemarkets.core.curvemath import (
    sum_of_squares,
    get_price,
    marginal_prices,
    cumulative_costs,
    ArithmeticUnderflowError,
    PRICE_NUMERATOR,
    PRICE_DENOMINATOR
)

UNIT = PRICE_NUMERATOR // PRICE_DENOMINATOR

def test_sum_of_squares_small_values():
    """S(n) sums k^2 for k < n."""
    assert sum_of_squares(0) == 0
    assert sum_of_squares(1) == 0
    assert sum_of_squares(2) == 1
    assert sum_of_squares(3) == 5
    assert sum_of_squares(11) == 385

def test_sum_of_squares_matches_brute_force():
    for n in range(1, 60):
        assert sum_of_squares(n) == sum(k * k for k in range(1, n))

def test_first_share_is_free():
    assert get_price(0, 1) == 0

def test_multiple_first_shares_underflow():
    """The first trade on a curve must be exactly one share."""
    with pytest.raises(ArithmeticUnderflowError):
        get_price(0, 2)
    with pytest.raises(ArithmeticError):
        get_price(0, 10)

def test_zero_amount_is_free():
    assert get_price(0, 0) == 0
    assert get_price(25, 0) == 0

def test_negative_inputs_rejected():
    with pytest.raises(ValueError):
        get_price(-1, 1)
    with pytest.raises(ValueError):
        get_price(1, -1)

def test_price_of_ten_after_first_share():
    """Shares 2..11 cost (1^2 + ... + 10^2) / 16000 tokens."""
    assert get_price(1, 10) == 385 * UNIT
    assert get_price(1, 10) == 24062500000000000

def test_single_share_price_is_square_of_supply():
    for supply in range(1, 30):
        assert get_price(supply, 1) == supply * supply * UNIT

def test_ranges_are_additive():
    """Pricing a range in two parts costs the same as pricing it at once."""
    for a in range(1, 8):
        for b in range(1, 8):
            assert get_price(1, a) + get_price(1 + a, b) == get_price(1, a + b)

def test_price_floors():
    """Integer division truncates rather than rounds."""
    assert get_price(1, 1, numerator=2, denominator=3) == 0
    assert get_price(2, 1, numerator=2, denominator=3) == 2  # 4 * 2 / 3

def test_marginal_prices():
    supplies = np.array([0, 1, 10, 100])
    prices = marginal_prices(supplies)
    assert np.allclose(prices, supplies ** 2 / 16000)

def test_marginal_prices_match_integer_pricing():
    for supply in (1, 5, 50):
        assert np.isclose(marginal_prices(supply), get_price(supply, 1) / 10**18)

def test_cumulative_costs():
    costs = cumulative_costs([0, 1, 11])
    assert np.allclose(costs, [0.0, 0.0, 385 / 16000])

def test_cumulative_costs_are_increasing():
    costs = cumulative_costs(np.arange(0, 200))
    assert np.all(np.diff(costs) >= 0)

def test_negative_supplies_rejected():
    with pytest.raises(ValueError):
        marginal_prices([-1, 2])
    with pytest.raises(ValueError):
        cumulative_costs([-3])

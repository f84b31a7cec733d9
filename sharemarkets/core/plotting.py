# sharemarkets/core/plotting.py

import numpy as np
import matplotlib.pyplot as plt
from sharemarkets.core.curvemath import marginal_prices, cumulative_costs

def plot_price_curve(max_supply: int, ax=None, show_cumulative: bool = False):
    """
    Plot the price of the next share against supply.

    Args:
        max_supply: Largest supply to draw
        ax: Axes to draw on; a new figure is created if omitted
        show_cumulative: Also draw the escrow held at each supply on a twin axis

    Returns:
        The Axes the curve was drawn on
    """
    if max_supply < 1:
        raise ValueError("max_supply must be at least 1")
    if ax is None:
        _, ax = plt.subplots()

    supplies = np.arange(0, max_supply + 1)
    ax.plot(supplies, marginal_prices(supplies), label="next share price")
    ax.set_xlabel("supply")
    ax.set_ylabel("price (tokens)")

    if show_cumulative:
        twin = ax.twinx()
        twin.plot(supplies, cumulative_costs(supplies), linestyle="--",
                  color="tab:orange", label="escrow")
        twin.set_ylabel("escrow (tokens)")

    ax.legend(loc="upper left")
    return ax

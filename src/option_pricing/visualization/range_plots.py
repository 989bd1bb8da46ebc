"""Plot the price and Greeks of a range sweep."""

from typing import TYPE_CHECKING
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

if TYPE_CHECKING:
    from ..valuation.results import ResultSet

# (result column, axis label, line colour)
_PANELS = (
    ("delta", "Delta", None),
    ("gamma", "Gamma", "orange"),
    ("vega", "Vega", "green"),
    ("theta", "Theta", "purple"),
    ("rho", "Rho", "brown"),
    ("price", "Option Price", "black"),
)


def plot_range_results(
    result_set: "ResultSet",
    range_label: str = "Range Variable",
    reference_value: float | None = None,
    figsize: tuple[float, float] = (14, 10),
) -> Figure:
    """Plot dashboard of the price and all Greeks against the swept input.

    Parameters
    ----------
    result_set : ResultSet
        Results of a range calculation, in grid order
    range_label : str, optional
        x-axis label naming the swept input (default: "Range Variable")
    reference_value : float, optional
        Draw a dashed vertical line here (e.g. the strike for a spot sweep)
    figsize : tuple[float, float], optional
        Figure size (default: (14, 10))

    Returns
    -------
    Figure
        Matplotlib figure object
    """
    if result_set.is_empty():
        raise ValueError("result_set is empty; nothing to plot")

    frame = result_set.to_frame()
    fig, axes = plt.subplots(2, 3, figsize=figsize)
    axes = axes.flatten()

    for ax, (column, label, color) in zip(axes, _PANELS):
        ax.plot(frame["range_variable"], frame[column], linewidth=2, color=color)
        if reference_value is not None:
            ax.axvline(x=reference_value, color="r", linestyle="--", alpha=0.5)
        ax.set_xlabel(range_label)
        ax.set_ylabel(label)
        ax.set_title(label)
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig

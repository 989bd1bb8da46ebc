"""Visualization module for option pricing results.

This module provides plotting functions for:
- Price and Greeks of a range sweep
"""

from .range_plots import plot_range_results

__all__ = [
    "plot_range_results",
]

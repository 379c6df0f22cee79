"""polyarb — cross-venue prediction-market arbitrage position matcher."""

__version__ = "0.1.0"

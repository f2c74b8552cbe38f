"""windreport: report vessel wind observations to a weather station network."""

__version__ = "0.3.0"

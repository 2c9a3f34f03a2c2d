"""Blue Zone ordering system monitor: order feed and service health polling."""

__version__ = "0.1.0"

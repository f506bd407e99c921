"""chronogrid - calendar scheduling and layout engine."""

__version__ = "0.1.0"

"""Interactive arithmetic calculator with named variables."""

__version__ = "0.1.0"

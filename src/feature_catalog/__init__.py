"""Feature catalog: browse, filter and analyse an inventory of ML model features."""

__version__ = "0.1.0"

"""Hourly normalization of raw parking-garage availability samples."""

__version__ = "1.0.0"

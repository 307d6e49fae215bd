"""Render authenticated dashboards into single-page PDF documents."""

__version__ = "0.1.0"

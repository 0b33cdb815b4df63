"""Choropleth dashboard for a numeric value per US state."""

__version__ = "0.1.0"

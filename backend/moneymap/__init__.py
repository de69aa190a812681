"""Money map projections: cascading allocation and compounding over a household flow graph."""

__version__ = "0.1.0"

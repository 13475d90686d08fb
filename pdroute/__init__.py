"""Travel-time matrices and validated input rows for pickup-and-delivery routing."""

__version__ = "0.4.2"
"""GitContent reconciliation hook for the Wing Cloud git operator."""

__version__ = "0.1.0"

"""Entra ID credential expiry alerts."""

__version__ = "1.0.0"

"""Bizboard: multi-tenant business-intelligence dashboard API."""

__version__ = "0.1.0"

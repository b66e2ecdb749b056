"""Client library for a personal-finance REST API."""

__version__ = "0.1.0"

"""Data-access layer for the library system: ORM schema and shared connections."""

__version__ = "0.1.0"

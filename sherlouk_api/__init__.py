"""Sherlouk back-office data service (users, tables, audit log)."""

__version__ = "0.1.0"

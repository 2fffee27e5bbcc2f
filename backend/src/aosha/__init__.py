"""Aosha campaign backend: accounts, maps and the live party channel."""

__version__ = "0.1.0"

"""Scoped, encrypted credential storage for git hosting providers and git transport."""

__version__ = "0.1.0"

"""Savorly recommendation and engagement engine."""

__version__ = "1.0.0"

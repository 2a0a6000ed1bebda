
"""Voice-memo transcript manager."""

__version__ = "0.1.0"

"""Daily repository activity automation."""

__version__ = "0.1.0"

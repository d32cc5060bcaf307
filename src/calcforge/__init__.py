"""calcforge: arithmetic expression engine and calculator CLI."""

__version__ = "0.1.0"

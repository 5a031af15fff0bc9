"""Discord bot that mirrors queue state into display messages."""

__version__ = "1.0.0"

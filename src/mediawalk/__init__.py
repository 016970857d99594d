"""Media-oriented filesystem tree walker."""

__version__ = "0.1.0"

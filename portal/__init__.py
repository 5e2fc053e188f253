"""Academic paper submission and review portal."""

__version__ = "0.1.0"

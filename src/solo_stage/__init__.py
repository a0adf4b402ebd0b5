"""Solo Stage: a single-author micro-posting service."""

__version__ = "0.1.0"

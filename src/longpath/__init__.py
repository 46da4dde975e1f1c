"""longpath — find filesystem paths that are too long."""

__version__ = "0.1.0"

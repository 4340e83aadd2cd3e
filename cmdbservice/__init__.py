"""Flask-based HTTP API for a configuration management database, backed by caller-supplied services."""

__version__ = "0.1.0"

__all__ = ["__version__"]
"""Backend of a personal time tracking application."""

__version__ = "0.1.0"

"""Interactive Android App Distribution release wizard."""

__version__ = "0.1.0"

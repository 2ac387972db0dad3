"""Command-line interface: terminal widgets and the release wizard."""

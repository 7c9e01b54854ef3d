"""Command-line interface for ninchat-master."""

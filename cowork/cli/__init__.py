"""Command-line interface for cowork."""

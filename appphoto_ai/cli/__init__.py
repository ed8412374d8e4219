"""Command-line interface for AppPhoto AI."""

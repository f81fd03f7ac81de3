"""Command-line interface for entityresolver."""

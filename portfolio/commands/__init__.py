"""Command-line commands for portfolio."""

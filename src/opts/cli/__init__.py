"""Command-line interface for the settings accessor."""

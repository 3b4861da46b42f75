"""hw command-line interface."""

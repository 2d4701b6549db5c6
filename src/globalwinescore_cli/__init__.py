"""Command-line interface for globalwinescore."""

"""Concrete score providers."""

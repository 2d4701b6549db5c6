"""Core domain models, interfaces and exceptions."""

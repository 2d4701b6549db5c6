"""Service layer over score providers."""

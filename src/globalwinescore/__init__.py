"""Client library for the GlobalWineScore wine rating API."""

__version__ = "1.0.0"

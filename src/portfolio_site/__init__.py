"""Backend for a personal portfolio and writing site."""

__version__ = "0.1.0"

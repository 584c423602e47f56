"""Chat research assistant that highlights cited web content on screenshots."""

__version__ = "0.1.0"
